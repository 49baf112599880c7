import random

import pytest

from puzzle_engine import ConfigError, Dictionary


def test_load_trims_and_skips_blank_lines(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("  apple \n\n\tbanana\n   \ncherry\n", encoding="utf-8")
    d = Dictionary.load(path)
    assert d.words == ("APPLE", "BANANA", "CHERRY")
    assert len(d) == 3


def test_load_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        Dictionary.load(tmp_path / "nope.txt")


def test_load_without_path():
    with pytest.raises(ConfigError):
        Dictionary.load("")


def test_load_empty_file(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("\n\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        Dictionary.load(path)


def test_random_word_comes_from_dictionary(dictionary, rng):
    for _ in range(50):
        assert dictionary.random_word(rng) in dictionary.words


def test_random_word_empty_dictionary():
    with pytest.raises(ConfigError):
        Dictionary().random_word(random.Random(0))


def test_random_words_count_allows_repeats(rng):
    d = Dictionary(["ONLY"])
    assert d.random_words(4, rng) == ["ONLY"] * 4
    assert d.random_words(0, rng) == []


def test_random_words_seeded_is_reproducible(dictionary):
    a = dictionary.random_words(10, random.Random(99))
    b = dictionary.random_words(10, random.Random(99))
    assert a == b


def test_close_matches_apple():
    d = Dictionary(["A", "I"])
    matches = d.close_matches("APPLE")

    deletions = {"PPLE", "APLE", "APPE", "APPL"}
    insertions = set()
    for i in range(len("APPLE") + 1):
        for letter in ("A", "I"):
            insertions.add("APPLE"[:i] + letter + "APPLE"[i:])
    expected = (deletions | insertions) - {"APPLE"}

    assert set(matches) == expected
    assert len(matches) == len(set(matches))
    assert "APPLE" not in matches
    assert matches[:4] == ["PPLE", "APLE", "APPE", "APPL"]


def test_close_matches_only_single_letter_entries():
    d = Dictionary(["AB", "CAT", "X"])
    matches = d.close_matches("HI")
    # "AB" and "CAT" are not single letters, so only X is ever inserted
    assert set(matches) == {"I", "H", "XHI", "HXI", "HIX"}


def test_close_matches_without_letters_is_deletions_only():
    d = Dictionary(["HOUSE"])
    assert d.close_matches("TOO") == ["OO", "TO"]
