import numpy as np

from models.errors import InvalidCoordinate, InvalidPuzzle, InvalidValue

GRID_SIZE = 9
BOX_SIZE = 3
EMPTY = 0


def _is_int(value):
    return isinstance(value, (int, np.integer)) and not isinstance(value, (bool, np.bool_))


class SudokuSolver:
    def __init__(self):
        pass

    def is_valid(self, grid, row, col, num):
        """Check if placing num at (row, col) is valid"""
        if not (_is_int(row) and 0 <= row < GRID_SIZE):
            raise InvalidCoordinate(f"row must be in 0-8, got {row!r}")
        if not (_is_int(col) and 0 <= col < GRID_SIZE):
            raise InvalidCoordinate(f"col must be in 0-8, got {col!r}")
        if not (_is_int(num) and 1 <= num <= 9):
            raise InvalidValue(f"value must be in 1-9, got {num!r}")

        return self._can_place(grid, row, col, num)

    def _can_place(self, grid, row, col, num):
        # Check row
        for j in range(GRID_SIZE):
            if grid[row][j] == num:
                return False

        # Check column
        for i in range(GRID_SIZE):
            if grid[i][col] == num:
                return False

        # Check 3x3 box
        start_row = (row // BOX_SIZE) * BOX_SIZE
        start_col = (col // BOX_SIZE) * BOX_SIZE

        for i in range(start_row, start_row + BOX_SIZE):
            for j in range(start_col, start_col + BOX_SIZE):
                if grid[i][j] == num:
                    return False

        return True

    def solve(self, grid):
        """Solve grid in place with backtracking.

        Returns True with grid fully solved, or False with every placement
        rolled back. Malformed or contradictory grids raise InvalidPuzzle
        before the search starts and are left untouched.
        """
        self.validate_puzzle(grid)
        if not isinstance(grid, np.ndarray):
            if not isinstance(grid, list) or not all(isinstance(row, list) for row in grid):
                raise InvalidPuzzle("grid must be a list of lists or a numpy array to be solved in place")

        return self._solve_helper(grid)

    def solved_copy(self, grid):
        """Return a solved copy of grid, or None if it has no solution"""
        self.validate_puzzle(grid)
        # Create a copy to avoid modifying original
        solution = [[int(cell) for cell in row] for row in grid]

        if self._solve_helper(solution):
            return solution
        return None

    def _solve_helper(self, grid):
        """Recursive helper for solving"""
        empty = self.find_empty_cell(grid)
        if empty is None:
            return True

        i, j = empty
        for num in range(1, 10):
            if self._can_place(grid, i, j, num):
                grid[i][j] = num

                if self._solve_helper(grid):
                    return True

                grid[i][j] = EMPTY  # Backtrack

        return False

    def find_empty_cell(self, grid):
        """First empty cell in row-major order, or None"""
        for i in range(GRID_SIZE):
            for j in range(GRID_SIZE):
                if grid[i][j] == EMPTY:
                    return i, j
        return None

    def find_conflict(self, grid):
        """Return (row, col, num) of the first given that clashes with another one"""
        work = [[int(cell) for cell in row] for row in grid]
        for i in range(GRID_SIZE):
            for j in range(GRID_SIZE):
                if work[i][j] != EMPTY:
                    num = work[i][j]
                    work[i][j] = EMPTY  # Temporarily remove

                    clash = not self._can_place(work, i, j, num)
                    work[i][j] = num  # Restore

                    if clash:
                        return i, j, num
        return None

    def is_valid_sudoku(self, grid):
        """Check if the current grid state is valid"""
        return self.find_conflict(grid) is None

    def validate_puzzle(self, grid):
        """Raise InvalidPuzzle unless grid is a consistent 9x9 matrix of digits 0-9"""
        try:
            cells = np.asarray(grid)
        except (TypeError, ValueError, OverflowError) as e:
            raise InvalidPuzzle(f"grid is not a 9x9 matrix: {e}") from e

        if cells.shape != (GRID_SIZE, GRID_SIZE):
            raise InvalidPuzzle(f"grid must be 9x9, got shape {cells.shape}")
        if not np.issubdtype(cells.dtype, np.integer):
            raise InvalidPuzzle(f"grid cells must be integers, got {cells.dtype}")

        out_of_range = np.argwhere((cells < 0) | (cells > 9))
        if len(out_of_range):
            row, col = out_of_range[0]
            raise InvalidPuzzle(
                f"cell [{row},{col}] holds {cells[row, col]}, expected a digit 0-9")

        conflict = self.find_conflict(cells)
        if conflict is not None:
            row, col, num = conflict
            raise InvalidPuzzle(
                f"cell [{row},{col}] repeats {num} in its row, column or box")
