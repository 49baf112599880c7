import random

import pytest

import puzzle_engine as eng

DICT_WORDS = [
    "A", "I", "O",
    "ACORN", "BREAD", "CANDLE", "GARDEN", "HONEY", "ISLAND",
    "JACKET", "LADDER", "MARBLE", "NAPKIN", "ORBIT", "PENCIL",
]


@pytest.fixture(autouse=True)
def quiet_logger():
    """Swallow engine output so test logs stay readable; expose it for asserts."""
    lines = []
    eng.set_logger(lines.append)
    yield lines
    eng.set_logger(None)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def dict_path(tmp_path):
    path = tmp_path / "dict.txt"
    path.write_text("\n".join(DICT_WORDS) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def dictionary():
    return eng.Dictionary(DICT_WORDS)
