GRID_ROWS = 8
GRID_COLS = 8

# Fixed logical timestep of the frame loop.
FIXED_DT = 1 / 60

# Minimum run length that counts as a match.
MIN_RUN = 3

# Points per removed gem, multiplied by the current combo depth.
BASE_POINTS = 10

# Swap animation length in seconds (progress advances 5 units per second).
SWAP_DURATION = 0.2
# Falling gems move at a constant speed in rows per second, independent of distance.
FALL_SPEED = 10.0
# Pop-in growth of freshly spawned gems, scale units per second.
SPAWN_SCALE_SPEED = 5.0

# Attempts allowed when generating a board with no matches and at least one legal swap.
MAX_LAYOUT_ATTEMPTS = 200

# Gem type name -> display color.
GEM_COLORS = {
    'red':    (255, 60, 60),
    'green':  (60, 200, 60),
    'blue':   (60, 100, 255),
    'yellow': (255, 220, 60),
    'purple': (180, 60, 200),
}
GEM_TYPE_NAMES = tuple(GEM_COLORS.keys())

# Window and board geometry used by the Arcade front end.
SCREEN_WIDTH = 450
SCREEN_HEIGHT = 550
CELL_SIZE = 50
GRID_OFFSET_X = 25
# Distance from the top edge of the window to the top edge of the board.
GRID_OFFSET_Y = 80
HEADER_HEIGHT = 70
