MIN_DIGIT = 1
MAX_DIGIT = 9
EMPTY_VALUE = 0

GRID_SIZE = 9
BLOCK_SIZE = 3
BLOCK_COUNT = 9

DIGITS = tuple(range(MIN_DIGIT, MAX_DIGIT + 1))
