from __future__ import annotations

from pathlib import Path
from typing import List, Union

from puzzle_engine import PuzzleResult


def _format_rows(rows: List[List[str]]) -> str:
    return "\n".join(" ".join(row) for row in rows)


def format_puzzle(result: PuzzleResult, solution: bool = False) -> str:
    """One grid row per line, letters separated by a space. Blank solution cells stay blank."""
    rows = result.solution_letters if solution else result.letters
    return _format_rows(rows)


def print_puzzle(result: PuzzleResult) -> None:
    print(format_puzzle(result))


def save_puzzle_to_file(result: PuzzleResult, path: Union[str, Path], include_solution: bool = True) -> None:
    """Puzzle grid, then (optionally) an empty line and the solution grid."""
    parts = [format_puzzle(result)]
    if include_solution:
        parts.append("")
        parts.append(format_puzzle(result, solution=True))
    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(parts) + "\n")
