#!/usr/bin/env python3
from __future__ import annotations

import argparse
import random
import sys
from typing import List, Optional

import puzzle_engine as eng
import svg_renderer as svg
from puzzle_config import PuzzleConfig, parse_config
from text_output import print_puzzle, save_puzzle_to_file

MAX_PUZZLE_SIZE = 1024


def generate_autosized(
    config: PuzzleConfig,
    dictionary_path: Optional[str] = None,
    verbose: bool = False,
    rng: Optional[random.Random] = None,
    dictionary: Optional[eng.Dictionary] = None,
    max_size: int = MAX_PUZZLE_SIZE,
) -> eng.PuzzleResult:
    """
    Build the puzzle described by config.
    size > 0: one attempt at that size.
    size == 0: start at the longest word and grow by one after every
    PlacementError, up to max_size. Validation errors are never retried.
    """
    _rng = rng if rng is not None else random.Random()
    if config.size:
        size = config.size
    else:
        size = max((len(eng.normalize_word(w)) for w in config.words), default=1)
        size = max(size, 1)

    if dictionary is None:
        # bad input is reported before the dictionary file is touched
        if size < 1:
            raise eng.ValidationError(f"invalid grid size {size} (must be positive)")
        eng.validate_difficulty(config.difficulty)
        eng.process_words(config.words, size)
        dictionary = eng.Dictionary.load(dictionary_path)

    if config.size:
        return eng.generate_puzzle(
            size, config.words, config.difficulty,
            verbose=verbose, rng=_rng, dictionary=dictionary,
        )

    while True:
        try:
            return eng.generate_puzzle(
                size, config.words, config.difficulty,
                verbose=verbose, rng=_rng, dictionary=dictionary,
            )
        except eng.PlacementError as e:
            if size >= max_size:
                raise
            eng._log(f"auto-size: {e}; retrying at {size + 1}x{size + 1}")
            size += 1


def write_outputs(result: eng.PuzzleResult, config: PuzzleConfig, make_pdf: bool = True) -> List[str]:
    """Text file with solution, puzzle and solution SVGs, and PDFs unless turned off."""
    base = config.output_basename
    written: List[str] = []

    txt_path = base + ".txt"
    save_puzzle_to_file(result, txt_path, include_solution=True)
    written.append(txt_path)

    look = svg.Appearance(columns=config.columns)
    puz_svg = svg.render_puzzle_svg(result, look, title=config.title, words=config.words)
    sol_svg = svg.render_solution_svg(result, look, title=config.title)
    pages = [(base, puz_svg), (base + "-solution", sol_svg)]

    for name, text in pages:
        svg.save_svg(text, name + ".svg")
        written.append(name + ".svg")
    if make_pdf:
        for name, text in pages:
            svg.save_pdf(text, name + ".pdf")
            written.append(name + ".pdf")
    return written


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Generate a word search puzzle from a YAML description.")
    ap.add_argument("-i", "--input", required=True, help="YAML input file")
    ap.add_argument("-d", "--dictionary", default="", help="dictionary file, one word per line")
    ap.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    ap.add_argument("-s", "--seed", type=int, default=None, help="random seed for reproducible output")
    ap.add_argument("--no-pdf", action="store_true", help="skip PDF output")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    rng = random.Random(args.seed)

    try:
        config = parse_config(args.input)
        eng._log(f"size={config.size}, autoSize={config.size == 0}")
        result = generate_autosized(config, args.dictionary, args.verbose, rng)
    except eng.PuzzleError as e:
        print(f"Error: failed to generate puzzle: {e}")
        return 1

    print(config.title)
    print_puzzle(result)

    try:
        write_outputs(result, config, make_pdf=not args.no_pdf)
    except (OSError, svg.RenderError) as e:
        print(f"Error: failed to save puzzle: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
