from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

import yaml

from puzzle_engine import ConfigError, ValidationError, is_valid_word, _log


@dataclass
class PuzzleConfig:
    """
    One puzzle description, as read from YAML.
    size == 0 means "pick the smallest size that works" (see wordsearch.py).
    """
    title: str = ""
    size: int = 0
    columns: int = 0
    difficulty: int = 0
    words: List[str] = field(default_factory=list)
    output_basename: str = ""


# -----------------------------------------------------------------------------
# Word list files
# -----------------------------------------------------------------------------
def read_words_file(path: Union[str, Path]) -> List[str]:
    """
    Read a newline-delimited word list. Blank lines are skipped,
    anything that is not letters-only is rejected.
    """
    words: List[str] = []
    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            for line in f:
                word = line.strip()
                if not word:
                    continue
                if not is_valid_word(word):
                    raise ValidationError(f"invalid word found in {path}: {word}")
                words.append(word)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"cannot read word list {path}: {e}") from e
    _log(f"words: loaded {len(words)} from {path}")
    return words


# -----------------------------------------------------------------------------
# YAML loading
# -----------------------------------------------------------------------------
def _int_field(data: dict, key: str, path) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{path}: '{key}' must be an integer, got {value!r}")
    return value


def _word_item(value, path) -> str:
    """
    YAML 1.1 reads unquoted no/yes/on/off as booleans and 1.5 as a float.
    Those must be quoted. Plain integers stay text so the engine rejects them.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    raise ConfigError(f"{path}: word {value!r} is not text; put it in quotes")


def parse_config(path: Union[str, Path]) -> PuzzleConfig:
    """
    Load a puzzle YAML file:

        title: "Fruit"
        size: 12            # 0 or missing: auto-size
        columns: 3
        difficulty: 3
        words: [apple, banana, cherry]
        words_file: more.txt   # optional, relative to this file
        output_basename: fruit # optional, defaults to the YAML file name
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"cannot parse config {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")

    words = data.get("words") or []
    if not isinstance(words, list):
        raise ConfigError(f"{path}: 'words' must be a list")
    words = [_word_item(w, path) for w in words if w is not None]

    words_file = data.get("words_file")
    if words_file:
        wf = Path(str(words_file))
        if not wf.is_absolute():
            wf = path.parent / wf
        words.extend(read_words_file(wf))

    title = data.get("title") or ""
    output_basename = data.get("output_basename") or path.stem

    config = PuzzleConfig(
        title=str(title),
        size=_int_field(data, "size", path),
        columns=_int_field(data, "columns", path),
        difficulty=_int_field(data, "difficulty", path),
        words=words,
        output_basename=str(output_basename),
    )
    _log(f"config: '{config.title}' with {len(config.words)} words from {path}")
    return config
