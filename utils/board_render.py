import cv2
import numpy as np

GRID_SIZE = 450
CELL_SIZE = GRID_SIZE // 9
STATUS_HEIGHT = 40
STATUS_FONT_SCALE = 0.6

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
ENTRY_COLOR = (255, 102, 0)  # blue for user input
SOLVED_COLOR = (0, 150, 0)
ERROR_FILL = (200, 200, 255)
CURSOR_FILL = (250, 230, 200)


def cell_origin(row, col):
    """Top-left pixel of a cell"""
    return col * CELL_SIZE, row * CELL_SIZE


def cell_at(x, y):
    """Map a pixel position on the board to (row, col), or None outside the grid"""
    if not (0 <= x < GRID_SIZE and 0 <= y < GRID_SIZE):
        return None
    return y // CELL_SIZE, x // CELL_SIZE


def _fill_cell(image, row, col, color):
    x, y = cell_origin(row, col)
    cv2.rectangle(image, (x, y), (x + CELL_SIZE - 1, y + CELL_SIZE - 1), color, -1)


def _put_digit(image, row, col, digit, color):
    x, y = cell_origin(row, col)
    x += CELL_SIZE // 2
    y += CELL_SIZE // 2
    cv2.putText(image, str(digit), (x - 10, y + 10),
                cv2.FONT_HERSHEY_SIMPLEX, 0.8, color, 2)


def _draw_grid_lines(image):
    # Thick lines mark the 3x3 boxes
    for i in range(10):
        thickness = 3 if i % 3 == 0 else 1
        cv2.line(image, (i * CELL_SIZE, 0),
                 (i * CELL_SIZE, GRID_SIZE), BLACK, thickness)
        cv2.line(image, (0, i * CELL_SIZE),
                 (GRID_SIZE, i * CELL_SIZE), BLACK, thickness)


def render_board(puzzle, entries=None, errors=None, cursor=None, solution=None, status=None):
    """Draw the board as a BGR image.

    Givens are black and user entries blue; cells in ``errors`` get a red
    tint. When ``solution`` is passed every cell shows its solved digit,
    with the filled-in ones in green.
    """
    entries = entries or {}
    errors = errors or set()

    height = GRID_SIZE + (STATUS_HEIGHT if status is not None else 0)
    image = np.ones((height, GRID_SIZE, 3), dtype=np.uint8) * 255

    for row in range(9):
        for col in range(9):
            if (row, col) in errors:
                _fill_cell(image, row, col, ERROR_FILL)
            elif cursor == (row, col):
                _fill_cell(image, row, col, CURSOR_FILL)

            given = puzzle[row][col]
            if solution is not None:
                color = BLACK if given != 0 else SOLVED_COLOR
                _put_digit(image, row, col, solution[row][col], color)
            elif given != 0:
                _put_digit(image, row, col, given, BLACK)
            elif entries.get((row, col)):
                _put_digit(image, row, col, entries[(row, col)], ENTRY_COLOR)

    _draw_grid_lines(image)

    if status is not None:
        draw_status(image, status)

    return image


def fit_text(text, max_width, font_scale=STATUS_FONT_SCALE):
    """Cut text down with a trailing ellipsis until it fits max_width pixels"""
    def width(s):
        return cv2.getTextSize(s, cv2.FONT_HERSHEY_SIMPLEX, font_scale, 1)[0][0]

    if width(text) <= max_width:
        return text
    while text and width(text + "...") > max_width:
        text = text[:-1]
    return text + "..."


def draw_status(image, text):
    """Write a status message in the bar under the board"""
    if image.shape[0] <= GRID_SIZE:
        return image

    cv2.rectangle(image, (0, GRID_SIZE + 1), (image.shape[1] - 1, image.shape[0] - 1), WHITE, -1)
    text = fit_text(text, image.shape[1] - 20)
    cv2.putText(image, text, (10, GRID_SIZE + STATUS_HEIGHT // 2 + 7),
                cv2.FONT_HERSHEY_SIMPLEX, STATUS_FONT_SCALE, BLACK, 1)
    return image
