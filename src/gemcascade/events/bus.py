from blinker import Signal
from typing import Callable, Dict, List

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}
        self._taps: List[Callable[[str, dict], None]] = []

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Use weak=False to retain strong reference to bound methods so systems not kept in a variable still receive events.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def tap(self, fn: Callable[[str, dict], None]):
        """Observe every emission in emission order, before its receivers run."""
        self._taps.append(fn)

    def untap(self, fn: Callable[[str, dict], None]):
        if fn in self._taps:
            self._taps.remove(fn)

    def emit(self, name: str, **payload):
        for fn in list(self._taps):
            fn(name, payload)
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# INPUT & SELECTION
# ============================================================================
EVENT_TILE_CLICK = "tile_click"                    # payload: row, col
EVENT_TILE_SELECTED = "tile_selected"              # payload: row, col
EVENT_TILE_DESELECTED = "tile_deselected"          # payload: reason=str, prev_row, prev_col


# ============================================================================
# SWAPS
# ============================================================================
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_REJECTED = "tile_swap_rejected"    # payload: src=(r,c), dst=(r,c), reason=str
EVENT_TILE_SWAP_COMMITTED = "tile_swap_committed"  # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_REVERTED = "tile_swap_reverted"    # payload: src=(r,c), dst=(r,c)


# ============================================================================
# MATCHES & CASCADES
# ============================================================================
EVENT_MATCH_FOUND = "match_found"                  # payload: positions=[(r,c),...], runs=[[(r,c),...],...], depth=int
EVENT_GEM_REMOVED = "gem_removed"                  # payload: gem_type=str, cell=(r,c), combo_depth=int, points=int
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions=[(r,c),...], types=[(r,c,type),...]
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=[{'from','to','type_name'}], columns=[int,...]
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[(r,c),...]
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, positions=[(r,c),...], score_delta=int
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int, move_count=int
EVENT_SCORE_CHANGED = "score_changed"              # payload: score=int, delta=int, combo_depth=int
EVENT_BOARD_RESHUFFLED = "board_reshuffled"        # payload: reason=str


# ============================================================================
# ANIMATION & PHASES
# ============================================================================
EVENT_ANIMATION_START = "animation_start"          # payload: kind=str, items=list
EVENT_ANIMATION_COMPLETE = "animation_complete"    # payload: kind=str, items=list
EVENT_PHASE_CHANGED = "phase_changed"              # payload: previous=ResolverPhase, phase=ResolverPhase


# ============================================================================
# GAME FLOW & SESSION
# ============================================================================
EVENT_GAME_MODE_CHANGED = "game_mode_changed"      # payload: previous_mode=GameMode|None, new_mode=GameMode
EVENT_SESSION_STARTED = "session_started"          # payload: rows=int, cols=int
EVENT_SESSION_ABORTED = "session_aborted"          # payload: score=int, high_score=int


ENGINE_EVENTS = (
    EVENT_TILE_SELECTED,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_REJECTED,
    EVENT_TILE_SWAP_COMMITTED,
    EVENT_TILE_SWAP_REVERTED,
    EVENT_MATCH_FOUND,
    EVENT_GEM_REMOVED,
    EVENT_MATCH_CLEARED,
    EVENT_GRAVITY_APPLIED,
    EVENT_REFILL_COMPLETED,
    EVENT_CASCADE_STEP,
    EVENT_CASCADE_COMPLETE,
    EVENT_SCORE_CHANGED,
    EVENT_BOARD_RESHUFFLED,
    EVENT_ANIMATION_START,
    EVENT_ANIMATION_COMPLETE,
    EVENT_PHASE_CHANGED,
    EVENT_GAME_MODE_CHANGED,
    EVENT_SESSION_STARTED,
    EVENT_SESSION_ABORTED,
)
