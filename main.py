import argparse
import sys

import cv2

from models.errors import InvalidPuzzle, PuzzleSourceError
from models.puzzle_source import PuzzleSource, configured_url, load_puzzle_file
from models.sudoku_solver import SudokuSolver
from utils.board_render import cell_at, render_board

WINDOW_NAME = 'Sudoku'

# cv2.waitKeyEx codes for the arrow keys (GTK and Windows backends)
ARROW_KEYS = {
    65361: 'left', 65362: 'up', 65363: 'right', 65364: 'down',
    2424832: 'left', 2490368: 'up', 2555904: 'right', 2621440: 'down',
}
LETTER_MOVES = {ord('a'): 'left', ord('w'): 'up', ord('d'): 'right', ord('s'): 'down'}
CLEAR_KEYS = {ord('0'), 8, 127, 65288, 3014656, 65535}


class SudokuApp:
    def __init__(self, source=None):
        self.source = source if source is not None else PuzzleSource()
        self.sudoku_solver = SudokuSolver()
        self.current_grid = None
        self.solution_grid = None
        self.entries = {}
        self.errors = set()
        self.cursor = (0, 0)
        self.solved_board = None
        self.status = ""

    def notify(self, message):
        """Print a message and show it under the board"""
        print(message)
        self.status = message

    def load_puzzle(self, grid):
        """Make grid the current puzzle and compute its solution"""
        self.sudoku_solver.validate_puzzle(grid)

        self.current_grid = [[int(cell) for cell in row] for row in grid]
        self.solution_grid = self.sudoku_solver.solved_copy(self.current_grid)
        self.entries = {}
        self.errors = set()
        self.cursor = (0, 0)
        self.solved_board = None

        if self.solution_grid is None:
            self.notify("Puzzle loaded, but it has no solution.")
        else:
            self.notify("New puzzle loaded.")

    def new_puzzle(self):
        """Fetch a fresh puzzle; keep the current one if that fails"""
        try:
            grid = self.source.fetch()
            self.load_puzzle(grid)
        except (PuzzleSourceError, InvalidPuzzle) as e:
            self.notify(f"Error fetching puzzle: {e}")
            return False
        return True

    def is_given(self, row, col):
        return self.current_grid is not None and self.current_grid[row][col] != 0

    def enter_digit(self, row, col, digit):
        """Store a user digit for an empty cell; 0 clears it"""
        if self.current_grid is None or self.solved_board is not None:
            return False
        if not (0 <= row < 9 and 0 <= col < 9):
            return False
        if self.is_given(row, col):
            return False
        if not 0 <= digit <= 9:
            return False

        if digit == 0:
            self.entries.pop((row, col), None)
        else:
            self.entries[(row, col)] = digit
        self.errors.discard((row, col))
        return True

    def check_answer(self):
        """Mark filled entries that disagree with the solution"""
        if self.solution_grid is None:
            self.notify("There is no solution to check against.")
            return False

        self.errors = {
            (row, col) for (row, col), digit in self.entries.items()
            if digit != self.solution_grid[row][col]
        }

        if self.errors:
            self.notify("There are errors in your solution. Keep trying!")
            return False
        self.notify("Congratulations! You've solved the puzzle!")
        return True

    def solve_puzzle(self):
        """Solve a copy of the puzzle and switch to the solved view"""
        if self.current_grid is None:
            self.notify("No puzzle loaded.")
            return None

        board = [row[:] for row in self.current_grid]
        if self.sudoku_solver.solve(board):
            self.solved_board = board
            self.errors = set()
            self.notify("Puzzle solved!")
            return board

        self.notify("This puzzle cannot be solved.")
        return None

    def move_cursor(self, direction):
        """Move the focused cell; edges stop movement, rows never wrap"""
        row, col = self.cursor
        if direction == 'up' and row > 0:
            row -= 1
        elif direction == 'down' and row < 8:
            row += 1
        elif direction == 'left' and col > 0:
            col -= 1
        elif direction == 'right' and col < 8:
            col += 1
        self.cursor = (row, col)
        return self.cursor

    def reset_solution(self):
        """Leave the solved view and clear user input"""
        self.solved_board = None
        self.entries = {}
        self.errors = set()
        self.notify("Board reset!")

    def render(self):
        if self.current_grid is None:
            return render_board([[0] * 9 for _ in range(9)], status=self.status)
        return render_board(self.current_grid, self.entries, self.errors,
                            cursor=self.cursor, solution=self.solved_board,
                            status=self.status)

    def handle_key(self, key):
        """Apply one key press; returns False when the app should quit"""
        if key in (ord('q'), 27):
            return False

        direction = ARROW_KEYS.get(key) or LETTER_MOVES.get(key)
        if direction:
            self.move_cursor(direction)
        elif ord('1') <= key <= ord('9'):
            self.enter_digit(*self.cursor, key - ord('0'))
        elif key in CLEAR_KEYS:
            self.enter_digit(*self.cursor, 0)
        elif key == ord('n'):
            self.new_puzzle()
        elif key == ord('v'):
            self.solve_puzzle()
        elif key == ord('c'):
            self.check_answer()
        elif key == ord('r'):
            self.reset_solution()
        return True

    def on_mouse(self, event, x, y, flags, param):
        if event == cv2.EVENT_LBUTTONDOWN:
            cell = cell_at(x, y)
            if cell is not None:
                self.cursor = cell

    def run(self):
        print("Sudoku Started!")
        print("Controls:")
        print("  Arrows / w a s d - Move between cells")
        print("  1-9 - Enter digit, 0 or Backspace - Clear cell")
        print("  'n' - New puzzle")
        print("  'v' - Solve puzzle")
        print("  'c' - Check answer")
        print("  'r' - Reset board")
        print("  'q' - Quit")

        if self.current_grid is None:
            self.new_puzzle()

        cv2.namedWindow(WINDOW_NAME)
        cv2.setMouseCallback(WINDOW_NAME, self.on_mouse)

        while True:
            cv2.imshow(WINDOW_NAME, self.render())

            key = cv2.waitKeyEx(50)
            if key == -1:
                continue
            if not self.handle_key(key):
                break

        cv2.destroyAllWindows()

    def print_grid(self, grid, title="Grid:"):
        """Print grid to console"""
        print(f"\n{title}")
        for i, row in enumerate(grid):
            if i % 3 == 0 and i != 0:
                print("------+-------+------")

            row_str = ""
            for j, cell in enumerate(row):
                if j % 3 == 0 and j != 0:
                    row_str += "| "
                row_str += str(cell if cell != 0 else '.') + " "

            print(row_str)


def build_parser():
    parser = argparse.ArgumentParser(description="Play or solve a Sudoku puzzle")
    parser.add_argument('--url', default=configured_url(),
                        help="puzzle API endpoint")
    parser.add_argument('--timeout', type=float, default=10.0,
                        help="network timeout in seconds")
    parser.add_argument('--puzzle-file',
                        help="start from a puzzle file (JSON matrix or 81 characters)")
    parser.add_argument('--solve', action='store_true',
                        help="print the solution and exit without opening a window")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    app = SudokuApp(PuzzleSource(args.url, timeout=args.timeout))

    try:
        if args.puzzle_file:
            app.load_puzzle(load_puzzle_file(args.puzzle_file))
        elif args.solve:
            app.load_puzzle(app.source.fetch())
    except (PuzzleSourceError, InvalidPuzzle) as e:
        print(f"Error: {e}")
        return 2

    if args.solve:
        app.print_grid(app.current_grid, "Puzzle:")
        solution = app.solve_puzzle()
        if solution is None:
            return 1
        app.print_grid(solution, "Solution:")
        return 0

    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
