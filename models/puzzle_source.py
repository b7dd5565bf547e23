import json
import os
from urllib.request import Request, urlopen

from models.errors import PuzzleSourceError

DEFAULT_PUZZLE_URL = 'https://sudoku-api.vercel.app/api/dosuku'


def configured_url():
    """Puzzle endpoint, overridable with SUDOKU_API_URL"""
    return os.environ.get('SUDOKU_API_URL', DEFAULT_PUZZLE_URL)


def parse_payload(data):
    """Pull the puzzle grid out of a dosuku API response"""
    try:
        value = data['newboard']['grids'][0]['value']
    except (KeyError, IndexError, TypeError) as e:
        raise PuzzleSourceError(f"Unexpected puzzle payload: missing {e}") from e

    if not isinstance(value, list) or not all(isinstance(row, list) for row in value):
        raise PuzzleSourceError("Unexpected puzzle payload: grid is not a list of rows")

    try:
        return [[int(cell) for cell in row] for row in value]
    except (TypeError, ValueError) as e:
        raise PuzzleSourceError(f"Unexpected puzzle payload: {e}") from e


class PuzzleSource:
    def __init__(self, url=None, timeout=10.0):
        self.url = url if url is not None else configured_url()
        self.timeout = timeout

    def fetch(self):
        """Fetch a new puzzle from the remote API"""
        request = Request(self.url, headers={'Accept': 'application/json'})
        try:
            with urlopen(request, timeout=self.timeout) as response:
                data = json.loads(response.read().decode('utf-8'))
        except OSError as e:
            raise PuzzleSourceError(f"Error fetching puzzle from {self.url}: {e}") from e
        except ValueError as e:
            raise PuzzleSourceError(f"Puzzle response from {self.url} is not JSON: {e}") from e

        return parse_payload(data)


def load_puzzle_file(path):
    """Load a puzzle from a JSON matrix or an 81-character string file"""
    try:
        with open(path, encoding='utf-8') as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise PuzzleSourceError(f"Cannot read {path}: {e}") from e

    stripped = text.strip()
    if stripped.startswith('['):
        try:
            grid = json.loads(stripped)
        except ValueError as e:
            raise PuzzleSourceError(f"{path} is not valid JSON: {e}") from e
        if not isinstance(grid, list) or not all(isinstance(row, list) for row in grid):
            raise PuzzleSourceError(f"{path} must hold a list of rows")
        try:
            return [[int(cell) for cell in row] for row in grid]
        except (TypeError, ValueError) as e:
            raise PuzzleSourceError(f"{path} holds a non-numeric cell: {e}") from e

    digits = [ch for ch in stripped if not ch.isspace()]
    if len(digits) != 81:
        raise PuzzleSourceError(f"{path} must hold 81 cells, found {len(digits)}")

    cells = []
    for ch in digits:
        if ch == '.':
            cells.append(0)
        elif ch.isdigit():
            cells.append(int(ch))
        else:
            raise PuzzleSourceError(f"{path} holds unexpected character {ch!r}")

    return [cells[i * 9:(i + 1) * 9] for i in range(9)]
