import pytest


def rows(text):
    """Build a grid from 81 characters, '.' or '0' for blanks"""
    digits = [0 if ch == '.' else int(ch) for ch in text if not ch.isspace()]
    assert len(digits) == 81
    return [digits[i * 9:(i + 1) * 9] for i in range(9)]


PUZZLE = rows(
    "530070000"
    "600195000"
    "098000060"
    "800060003"
    "400803001"
    "700020006"
    "060000280"
    "000419005"
    "000080079"
)

SOLUTION = rows(
    "534678912"
    "672195348"
    "198342567"
    "859761423"
    "426853791"
    "713924856"
    "961537284"
    "287419635"
    "345286179"
)


@pytest.fixture
def puzzle():
    return [row[:] for row in PUZZLE]


@pytest.fixture
def solution():
    return [row[:] for row in SOLUTION]
