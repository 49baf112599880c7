import pytest

from puzzle_config import PuzzleConfig, parse_config, read_words_file
from puzzle_engine import ConfigError, ValidationError


def write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


def test_parse_config(tmp_path):
    path = write(tmp_path / "sample.yaml", """
title: "Sample Puzzle"
size: 15
difficulty: 3
words:
  - "apple"
  - "banana"
  - "orange"
output_basename: "sample_output"
""")
    config = parse_config(path)
    assert config == PuzzleConfig(
        title="Sample Puzzle",
        size=15,
        columns=0,
        difficulty=3,
        words=["apple", "banana", "orange"],
        output_basename="sample_output",
    )


def test_output_basename_defaults_to_file_name(tmp_path):
    path = write(tmp_path / "animals.yml", "words: [cat, dog]\n")
    config = parse_config(path)
    assert config.output_basename == "animals"
    assert config.size == 0
    assert config.title == ""


def test_numeric_words_stay_text(tmp_path):
    path = write(tmp_path / "n.yaml", "words: [apple, 1234]\n")
    assert parse_config(path).words == ["apple", "1234"]


def test_words_file_is_relative_to_config(tmp_path):
    sub = tmp_path / "lists"
    sub.mkdir()
    write(sub / "extra.txt", "lemon\n\n  mango \n")
    path = write(sub / "p.yaml", "words: [kiwi]\nwords_file: extra.txt\n")
    assert parse_config(path).words == ["kiwi", "lemon", "mango"]


def test_missing_config(tmp_path):
    with pytest.raises(ConfigError):
        parse_config(tmp_path / "missing.yaml")


def test_malformed_yaml(tmp_path):
    path = write(tmp_path / "bad.yaml", "words: [apple\n")
    with pytest.raises(ConfigError):
        parse_config(path)


@pytest.mark.parametrize("text", [
    "- just\n- a list\n",
    "words: apple\n",
    "size: big\n",
    "difficulty: true\n",
])
def test_wrong_types(tmp_path, text):
    path = write(tmp_path / "bad.yaml", text)
    with pytest.raises(ConfigError):
        parse_config(path)


def test_read_words_file(tmp_path):
    path = write(tmp_path / "w.txt", " apple\n\nBanana \n")
    assert read_words_file(path) == ["apple", "Banana"]


def test_read_words_file_rejects_non_letters(tmp_path):
    path = write(tmp_path / "w.txt", "apple\nr2d2\n")
    with pytest.raises(ValidationError):
        read_words_file(path)


def test_read_words_file_missing(tmp_path):
    with pytest.raises(ConfigError):
        read_words_file(tmp_path / "nope.txt")


@pytest.mark.parametrize("text", [
    "words: [apple, no]\n",
    "words: [on, off]\n",
    "words: [apple, 1.5]\n",
])
def test_unquoted_yaml_scalars_rejected(tmp_path, text):
    path = write(tmp_path / "w.yaml", text)
    with pytest.raises(ConfigError, match="quotes"):
        parse_config(path)


def test_quoted_yaml_words_kept(tmp_path):
    path = write(tmp_path / "w.yaml", 'words: ["no", "yes", "on"]\n')
    assert parse_config(path).words == ["no", "yes", "on"]


def test_read_words_file_rejects_non_latin(tmp_path):
    path = write(tmp_path / "w.txt", "apple\néclair\n")
    with pytest.raises(ValidationError):
        read_words_file(path)
