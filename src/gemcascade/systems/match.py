from typing import List

from gemcascade.systems.board_ops import Position, find_runs, merge_runs
from gemcascade.systems.grid import GridState


class MatchDetector:
    """Exhaustive scan for runs of equal gem types; marks every cell of every run."""

    def __init__(self, grid: GridState, min_run: int = 3):
        self.grid = grid
        self.min_run = min_run
        self.last_runs: List[List[Position]] = []

    def find_runs(self) -> List[List[Position]]:
        return find_runs(self.grid.type_map(), self.grid.rows, self.grid.cols, self.min_run)

    def find_groups(self) -> List[List[Position]]:
        return merge_runs(self.find_runs())

    def mark(self) -> bool:
        """Set ``matched`` on every cell of every qualifying run.

        Cells shared by a horizontal and a vertical run are marked once. Returns True
        if any cell was newly marked.
        """
        runs = self.find_runs()
        self.last_runs = runs
        newly_marked = False
        for run in runs:
            for row, col in run:
                gem = self.grid.get(row, col)
                assert gem is not None, f"run cell {(row, col)} is empty"
                assert not gem.falling, f"matched cell {(row, col)} is still falling"
                if not gem.matched:
                    gem.matched = True
                    newly_marked = True
        return newly_marked
