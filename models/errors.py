class SudokuError(Exception):
    """Base class for all sudoku errors"""


class InvalidPuzzle(SudokuError, ValueError):
    """Grid is not a well-formed 9x9 puzzle or its givens conflict"""


class InvalidCoordinate(SudokuError, ValueError):
    """Row or column outside 0-8"""


class InvalidValue(SudokuError, ValueError):
    """Candidate digit outside 1-9"""


class PuzzleSourceError(SudokuError):
    """Puzzle could not be fetched or the payload was not understood"""
