import random
import re

import pytest

import svg_renderer as svg
from puzzle_engine import Grid, PuzzleResult, place_word
from text_output import format_puzzle, print_puzzle, save_puzzle_to_file


@pytest.fixture
def small_result():
    grid = Grid(3)
    place_word(grid, "CAT", 0, 0, 1, 0, True)
    place_word(grid, "OX", 2, 2, -1, 0, False)
    grid.fill_remaining(random.Random(0))
    return PuzzleResult(grid=grid, placed_words=tuple(grid.placed_words))


def test_format_puzzle(small_result):
    lines = format_puzzle(small_result).splitlines()
    assert lines[0] == "C A T"
    assert lines[2].endswith("X O")
    assert all(len(line) == 5 for line in lines)


def test_format_solution_keeps_blanks(small_result):
    assert format_puzzle(small_result, solution=True).splitlines() == ["C A T", "     ", "     "]


def test_print_puzzle(small_result, capsys):
    print_puzzle(small_result)
    assert capsys.readouterr().out.startswith("C A T\n")


def test_save_with_solution(small_result, tmp_path):
    path = tmp_path / "out.txt"
    save_puzzle_to_file(small_result, path)
    lines = path.read_text(encoding="utf-8").split("\n")
    assert lines[0] == "C A T"
    assert lines[3] == ""
    assert lines[4] == "C A T"
    assert len(lines) == 8  # 3 + blank + 3 + trailing newline


def test_save_without_solution(small_result, tmp_path):
    path = tmp_path / "out.txt"
    save_puzzle_to_file(small_result, path, include_solution=False)
    assert len(path.read_text(encoding="utf-8").splitlines()) == 3


def test_puzzle_svg_has_letters_title_and_words(small_result):
    text = svg.render_puzzle_svg(small_result, svg.Appearance(columns=2), title="Pets & Co", words=["Cat", "Dog", "Emu"])
    assert text.startswith("<svg")
    assert text.rstrip().endswith("</svg>")
    assert "Pets &amp; Co" in text
    assert len(re.findall(r'text-anchor="middle">[A-Z]</text>', text)) == 9
    for word in ("Cat", "Dog", "Emu"):
        assert f">{word}</text>" in text


def test_word_list_wraps_by_columns(small_result):
    look = svg.Appearance(columns=2, list_align="Left")
    text = svg.render_puzzle_svg(small_result, look, words=["AA", "BB", "CC"])
    ys = [int(m) for m in re.findall(r'y="(\d+)" text-anchor="start">[A-C]{2}<', text)]
    assert ys[0] == ys[1] < ys[2]


def test_zero_columns_falls_back():
    assert svg._columns(svg.Appearance(columns=0)) == svg.DEFAULT_COLUMNS


def test_solution_svg_lines(small_result):
    text = svg.render_solution_svg(small_result)
    assert text.count("<line ") == len(small_result.placed_words) == 1
    # only the three solution letters are drawn
    assert len(re.findall(r'text-anchor="middle">[A-Z]</text>', text)) == 3


@pytest.mark.parametrize("style,marker", [("highlight", "fill-opacity"), ("circle", "rotate(")])
def test_solution_svg_styles(small_result, style, marker):
    text = svg.render_solution_svg(small_result, svg.Appearance(solution_mark_style=style))
    assert marker in text


def test_save_svg(small_result, tmp_path):
    path = tmp_path / "p.svg"
    svg.save_svg(svg.render_puzzle_svg(small_result), str(path))
    assert path.read_text(encoding="utf-8").startswith("<svg")
