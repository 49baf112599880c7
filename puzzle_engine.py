from __future__ import annotations

import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple, Optional, Sequence, Iterator, Union

# 8 compass directions for placement, as (dx, dy) with x = column, y = row
DIRECTIONS: Tuple[Tuple[int, int], ...] = tuple(
    (dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1) if (dx, dy) != (0, 0)
)

BLANK = " "
ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 9


# -----------------------------------------------------------------------------
# Simple logger hook
# -----------------------------------------------------------------------------
# app.py can call set_logger(my_ui_logger). If you do nothing, we print().
_LOGGER = None  # type: Optional[callable]


def set_logger(fn) -> None:
    """Allow the UI to inject a logger callback: fn(text: str)."""
    global _LOGGER
    _LOGGER = fn


def _log(msg: str) -> None:
    """Log to UI if available; otherwise print. Keep messages simple."""
    if _LOGGER:
        _LOGGER(msg)
        return
    print(msg)


def _debug(msg: str, verbose: bool) -> None:
    """Diagnostic detail, only when the caller asked for it."""
    if verbose:
        _log(msg)


# -----------------------------------------------------------------------------
# Errors
# -----------------------------------------------------------------------------
class PuzzleError(Exception):
    """Base class for everything the generator raises on purpose."""


class ConfigError(PuzzleError):
    """Unreadable or malformed input source (dictionary, YAML, word file)."""


class ValidationError(PuzzleError):
    """Bad caller input: difficulty out of range, bad word, empty word set."""


class PlacementError(PuzzleError):
    """A target word did not fit anywhere on the current grid."""

    def __init__(self, word: str, size: int):
        super().__init__(f"failed to insert word into the {size}x{size} grid: {word}")
        self.word = word
        self.size = size


# -----------------------------------------------------------------------------
# Data shapes used across the app
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class PlacedWord:
    """One placed target word: origin cell plus direction vector."""
    word: str
    x: int
    y: int
    dx: int
    dy: int

    def cells(self) -> List[Tuple[int, int]]:
        """All (x, y) grid coordinates used by this word, first letter first."""
        return [(self.x + i * self.dx, self.y + i * self.dy) for i in range(len(self.word))]

    @property
    def end(self) -> Tuple[int, int]:
        n = len(self.word) - 1
        return (self.x + n * self.dx, self.y + n * self.dy)


class Grid:
    """
    Square letter matrix with two planes, both indexed [x][y]:
      - display: everything the player sees (targets, decoys, filler)
      - solution: target-word letters only, BLANK elsewhere
    Placed target words are recorded in placed_words in insertion order.
    """

    def __init__(self, size: int):
        self.size = size
        self.display: List[List[str]] = [[BLANK] * size for _ in range(size)]
        self.solution: List[List[str]] = [[BLANK] * size for _ in range(size)]
        self.placed_words: List[PlacedWord] = []

    @classmethod
    def create(cls, size: int) -> "Grid":
        return cls(size)

    def is_in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def is_empty(self, x: int, y: int) -> bool:
        return self.display[x][y] == BLANK

    def fill_remaining(self, rng: Optional[random.Random] = None) -> int:
        """
        Replace every BLANK display cell with a random A-Z letter.
        Filled cells and the solution plane are never touched.
        Returns how many cells were filled (0 on an already full grid).
        """
        _rng = rng if rng is not None else random.Random()
        filled = 0
        for x in range(self.size):
            for y in range(self.size):
                if self.display[x][y] == BLANK:
                    self.display[x][y] = _rand_letter(_rng)
                    filled += 1
        return filled

    def display_rows(self) -> List[List[str]]:
        """Display plane in reading order: one list per row (y), left to right (x)."""
        return [[self.display[x][y] for x in range(self.size)] for y in range(self.size)]

    def solution_rows(self) -> List[List[str]]:
        return [[self.solution[x][y] for x in range(self.size)] for y in range(self.size)]


@dataclass(frozen=True)
class PuzzleResult:
    """
    The outcome of the generator. This is what the renderers need.
    The grid is fully filled when this is handed out; treat it as read-only.
    """
    grid: Grid
    placed_words: Tuple[PlacedWord, ...] = field(default_factory=tuple)

    @property
    def size(self) -> int:
        return self.grid.size

    @property
    def letters(self) -> List[List[str]]:
        return self.grid.display_rows()

    @property
    def solution_letters(self) -> List[List[str]]:
        return self.grid.solution_rows()


def _rand_letter(rng: random.Random) -> str:
    # Uppercase A-Z
    return ALPHABET[rng.randrange(len(ALPHABET))]


# -----------------------------------------------------------------------------
# Helpers: normalization and validation
# -----------------------------------------------------------------------------
def normalize_word(text: str) -> str:
    """Uppercase and drop all whitespace ("Shih Tzu" -> "SHIHTZU")."""
    return "".join(str(text).split()).upper()


def is_valid_word(word: str) -> bool:
    """Non-empty and Latin letters A-Z only (either case)."""
    return bool(word) and word.isascii() and word.isalpha()


def process_words(words: Sequence[str], size: int) -> List[str]:
    """
    Normalize, validate and order the target words.
    Longest first: long words are easier to fit while the grid is empty.
    The sort is stable so equal lengths keep the caller's order.
    Duplicates are kept on purpose; each one is placed on its own.
    """
    valid: List[str] = []
    for raw in words:
        word = normalize_word(raw)
        if not word:
            raise ValidationError(f"invalid word {raw!r} (empty after normalization)")
        if not is_valid_word(word):
            raise ValidationError(f"invalid word '{word}' (letters only)")
        if len(word) > size:
            raise ValidationError(f"invalid word '{word}' ({len(word)} is too long for size {size})")
        valid.append(word)

    if not valid:
        raise ValidationError("no valid words provided")

    return sorted(valid, key=len, reverse=True)


def validate_difficulty(difficulty: int) -> None:
    if isinstance(difficulty, bool) or not isinstance(difficulty, int):
        raise ValidationError(f"invalid difficulty {difficulty!r} (must be a whole number)")
    if not MIN_DIFFICULTY <= difficulty <= MAX_DIFFICULTY:
        raise ValidationError(
            f"invalid difficulty {difficulty} (only {MIN_DIFFICULTY}-{MAX_DIFFICULTY} allowed)"
        )


# -----------------------------------------------------------------------------
# Dictionary: random words and near-miss variants
# -----------------------------------------------------------------------------
class Dictionary:
    """
    Ordered, read-only word list. Entries are trimmed and uppercased on load;
    blank lines are dropped. Duplicates are kept, so sampling follows the file.
    """

    def __init__(self, words: Sequence[str] = ()):
        self._words: Tuple[str, ...] = tuple(words)

    @classmethod
    def from_lines(cls, lines) -> "Dictionary":
        words = []
        for line in lines:
            word = line.strip().upper()
            if word:
                words.append(word)
        return cls(words)

    @classmethod
    def load(cls, path: Union[str, Path, None]) -> "Dictionary":
        if not path:
            raise ConfigError("dictionary path not provided")
        try:
            with open(path, "r", encoding="utf-8-sig") as f:
                dictionary = cls.from_lines(f)
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"cannot read dictionary {path}: {e}") from e
        if not dictionary.words:
            raise ConfigError(f"dictionary {path} contains no words")
        _log(f"dictionary: loaded {len(dictionary)} words from {path}")
        return dictionary

    @property
    def words(self) -> Tuple[str, ...]:
        return self._words

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def random_word(self, rng: Optional[random.Random] = None) -> str:
        if not self._words:
            raise ConfigError("cannot draw a random word from an empty dictionary")
        _rng = rng if rng is not None else random.Random()
        return self._words[_rng.randrange(len(self._words))]

    def random_words(self, count: int, rng: Optional[random.Random] = None) -> List[str]:
        """count independent draws; repeats are allowed."""
        _rng = rng if rng is not None else random.Random()
        return [self.random_word(_rng) for _ in range(count)]

    def close_matches(self, word: str) -> List[str]:
        """
        Near-miss variants of word:
          - every single-character deletion
          - every insertion of a one-character dictionary entry, at every position
        Only single-character entries that exist in this dictionary are inserted,
        never the full alphabet. Result keeps first-seen order, has no
        duplicates and never contains word itself.
        """
        candidates: List[str] = []
        for i in range(len(word)):
            candidates.append(word[:i] + word[i + 1:])

        letters = [w for w in self._words if len(w) == 1]
        for i in range(len(word) + 1):
            for letter in letters:
                candidates.append(word[:i] + letter + word[i:])

        seen = set()
        out: List[str] = []
        for cand in candidates:
            if cand == word or cand in seen:
                continue
            seen.add(cand)
            out.append(cand)
        return out


# -----------------------------------------------------------------------------
# Difficulty policy
# -----------------------------------------------------------------------------
def should_reverse(difficulty: int, rng: Optional[random.Random] = None) -> bool:
    """True with probability difficulty/10 (always true from 10 up)."""
    _rng = rng if rng is not None else random.Random()
    return _rng.randrange(10) < difficulty


def reverse_word(word: str) -> str:
    return word[::-1]


def number_of_random_words(difficulty: int) -> int:
    return difficulty * 2


def number_of_close_matches(difficulty: int) -> int:
    # Not applied as a cap: every close match of every word is attempted.
    return difficulty


def adjust_words_for_difficulty(
    words: Sequence[str], difficulty: int, rng: Optional[random.Random] = None
) -> List[str]:
    """Copies of words, each reversed with should_reverse() odds. Input is untouched."""
    _rng = rng if rng is not None else random.Random()
    return [reverse_word(w) if should_reverse(difficulty, _rng) else w for w in words]


# -----------------------------------------------------------------------------
# Placement search
# -----------------------------------------------------------------------------
def can_place_word(grid: Grid, word: str, x: int, y: int, dx: int, dy: int) -> bool:
    """Check bounds and compatibility (allow crossing on identical letters)."""
    for i, ch in enumerate(word):
        cx = x + i * dx
        cy = y + i * dy
        if not grid.is_in_bounds(cx, cy):
            return False
        cell = grid.display[cx][cy]
        if cell != BLANK and cell != ch:
            return False
    return True


def overlapping_cells(grid: Grid, word: str, x: int, y: int, dx: int, dy: int) -> int:
    """How many letters of word would land on an identical, already set cell."""
    count = 0
    for i, ch in enumerate(word):
        cx = x + i * dx
        cy = y + i * dy
        if grid.is_in_bounds(cx, cy) and grid.display[cx][cy] == ch:
            count += 1
    return count


def place_word(grid: Grid, word: str, x: int, y: int, dx: int, dy: int, is_target_word: bool) -> None:
    """Write the word on the grid; targets also go to the solution plane and placed_words."""
    for i, ch in enumerate(word):
        grid.display[x + i * dx][y + i * dy] = ch
    if is_target_word:
        for i, ch in enumerate(word):
            grid.solution[x + i * dx][y + i * dy] = ch
        grid.placed_words.append(PlacedWord(word=word, x=x, y=y, dx=dx, dy=dy))


def find_best_placement(
    grid: Grid, word: str, rng: Optional[random.Random] = None
) -> Optional[Tuple[int, int, int, int]]:
    """
    Systematic scan of every start cell and direction, in random row/column order.
    Returns (x, y, dx, dy) of the feasible slot with the most overlap, or None.
    Ties go to whichever slot the shuffled scan reaches first.
    """
    _rng = rng if rng is not None else random.Random()
    xs = list(range(grid.size))
    ys = list(range(grid.size))
    _rng.shuffle(xs)
    _rng.shuffle(ys)

    best: Optional[Tuple[int, int, int, int]] = None
    max_overlap = -1
    for x in xs:
        for y in ys:
            for dx, dy in DIRECTIONS:
                if not can_place_word(grid, word, x, y, dx, dy):
                    continue
                overlap = overlapping_cells(grid, word, x, y, dx, dy)
                if overlap > max_overlap:
                    max_overlap = overlap
                    best = (x, y, dx, dy)
    return best


def try_place(
    grid: Grid,
    word: str,
    is_target_word: bool,
    rng: Optional[random.Random] = None,
    verbose: bool = False,
) -> bool:
    """Place word at its best slot. False (and no change to grid) if nothing fits."""
    best = find_best_placement(grid, word, rng)
    if best is None:
        _debug(f"place: no slot for '{word}' in {grid.size}x{grid.size}", verbose)
        return False
    x, y, dx, dy = best
    place_word(grid, word, x, y, dx, dy, is_target_word)
    _debug(f"place: '{word}' at ({x}, {y}) dir ({dx}, {dy})", verbose)
    return True


# ---------------------------------------------------------------------------
# High-level API
# ---------------------------------------------------------------------------
def generate_puzzle(
    size: int,
    words: Sequence[str],
    difficulty: int,
    dictionary_path: Union[str, Path, None] = None,
    verbose: bool = False,
    rng: Optional[random.Random] = None,
    dictionary: Optional[Dictionary] = None,
) -> PuzzleResult:
    """
    Orchestrator:
      - validate size, difficulty and words (normalized, longest first)
      - load the dictionary (or use the one passed in)
      - place every target word; the first one that does not fit aborts
      - best-effort decoys: random dictionary words, then close matches of
        each target (reversed copies at higher difficulty)
      - fill the leftover cells with random letters
    Pass a seeded rng for reproducible output. A PlacementError means the
    grid is too small; retry from scratch with a bigger size.
    """
    _rng = rng if rng is not None else random.Random()

    if size < 1:
        raise ValidationError(f"invalid grid size {size} (must be positive)")
    _log(f"generating {size}x{size} puzzle (difficulty {difficulty}, {len(words)} words)")

    grid = Grid.create(size)

    validate_difficulty(difficulty)
    valid_words = process_words(words, size)

    if dictionary is None:
        dictionary = Dictionary.load(dictionary_path)

    _debug("inserting search words", verbose)
    for word in valid_words:
        if not try_place(grid, word, True, _rng, verbose):
            raise PlacementError(word, size)

    _debug("inserting random words", verbose)
    for word in dictionary.random_words(number_of_random_words(difficulty), _rng):
        _try_decoy(grid, word, _rng, verbose)

    _debug("inserting close words", verbose)
    for word in adjust_words_for_difficulty(valid_words, difficulty, _rng):
        for close in dictionary.close_matches(word):
            _try_decoy(grid, close, _rng, verbose)

    grid.fill_remaining(_rng)

    for pw in grid.placed_words:
        _debug(f"word: {pw.word}, x: {pw.x}, y: {pw.y}, dx: {pw.dx}, dy: {pw.dy}", verbose)
    _log(f"placed {len(grid.placed_words)} words in {size}x{size}")

    return PuzzleResult(grid=grid, placed_words=tuple(grid.placed_words))


def _try_decoy(grid: Grid, word: str, rng: random.Random, verbose: bool) -> bool:
    """Decoys are filler: a miss is expected and never escalated."""
    if not is_valid_word(word):
        _debug(f"decoy: skipping '{word}' (letters only)", verbose)
        return False
    placed = try_place(grid, word, False, rng, verbose)
    if not placed:
        _debug(f"decoy: failed to insert '{word}'", verbose)
    return placed


def render_preview_ascii(result: PuzzleResult) -> str:
    """
    Simple ASCII for quick debugging.
    """
    lines = []
    for row in result.letters:
        lines.append(" ".join(ch if ch != BLANK else "." for ch in row))
    return "\n".join(lines)
