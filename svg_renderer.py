from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, List, Sequence, Tuple

# Result shapes and the shared error base
from puzzle_engine import PuzzleResult, BLANK, PuzzleError


class RenderError(PuzzleError):
    """CairoSVG could not convert a page (missing library, bad SVG, write failure)."""


# -----------------------------------------------------------------------------
# Simple logger hook (optional; mirrors puzzle_engine)
# -----------------------------------------------------------------------------
_LOGGER = None  # type: Optional[callable]


def set_logger(fn) -> None:
    """Allow the UI to inject a logger callback: fn(text: str)."""
    global _LOGGER
    _LOGGER = fn


def _log(msg: str) -> None:
    if _LOGGER:
        _LOGGER(msg)
        return
    print(msg)


DEFAULT_COLUMNS = 5


@dataclass
class Appearance:
    """
    Visual settings used by the SVG renderer.
    Keep this in sync with the UI fields in app.py.
    """
    # Title
    title_font_family: str = "Arial"
    title_font_size: int = 32
    title_font_color: str = "#000000"

    # Grid
    cell_bg_color: str = "#FFFFFF"
    cell_line_color: str = "#000000"
    cell_line_thickness: float = 1.0
    show_cell_lines: bool = False

    # Letters
    grid_font_family: str = "Courier"
    grid_font_size: int = 24
    grid_font_bold: bool = True
    grid_font_color: str = "#000000"

    # Word list
    list_font_family: str = "Arial"
    list_font_size: int = 15
    list_font_color: str = "#000000"
    list_align: str = "Center"  # "Left", "Center", "Right"
    columns: int = DEFAULT_COLUMNS
    show_word_list: bool = True

    # --- Solution marking options ---
    solution_mark_style: str = "line"     # "line" | "highlight" | "circle"
    solution_mark_color: str = "#C0C0C0"
    solution_mark_width: float = 4.0
    solution_circle_band_frac: float = 0.55    # fraction of cell height
    solution_circle_pad_len: float = 2.0       # extra length at each end (px)

    # Border
    add_border: bool = False
    border_thickness: float = 2.0
    border_color: str = "#000000"
    # Distance of border rectangle to the grid (px)
    border_distance: float = 2.0


# -----------------------------------------------------------------------------
# Tiny helper to build safe SVG text (no external lib, very basic)
# -----------------------------------------------------------------------------
def _esc(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def _text_anchor(align: str) -> str:
    if align.lower().startswith("c"):
        return "middle"
    if align.lower().startswith("r"):
        return "end"
    return "start"


@dataclass
class _Layout:
    cell: int
    pad: int
    grid_w: int
    grid_h: int
    title_h: int
    grid_top: int


def _layout(size: int, appearance: Appearance, title: str) -> _Layout:
    # Size math: cell becomes font_size * 1.6, with some padding
    cell = max(12, int(appearance.grid_font_size * 1.6))
    pad = int(cell * 0.4)
    title_h = int(appearance.title_font_size * 1.5) if title else 0
    return _Layout(
        cell=cell,
        pad=pad,
        grid_w=size * cell,
        grid_h=size * cell,
        title_h=title_h,
        grid_top=pad + title_h,
    )


def _columns(appearance: Appearance) -> int:
    cols = int(appearance.columns or 0)
    return cols if cols >= 1 else DEFAULT_COLUMNS


def _cell_center(lay: _Layout, x: int, y: int) -> Tuple[float, float]:
    return (lay.pad + x * lay.cell + 0.5 * lay.cell, lay.grid_top + y * lay.cell + 0.5 * lay.cell)


# -----------------------------------------------------------------------------
# Shared pieces
# -----------------------------------------------------------------------------
def _svg_open(total_w: int, total_h: int) -> str:
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" '
        f'width="{total_w}" height="{total_h}" '
        f'viewBox="0 0 {total_w} {total_h}">'
    )


def _title_svg(title: str, lay: _Layout, total_w: int, appearance: Appearance) -> List[str]:
    if not title:
        return []
    y = lay.pad + appearance.title_font_size
    return [
        f'<text x="{total_w // 2}" y="{y}" text-anchor="middle" '
        f'font-family="{_esc(appearance.title_font_family)}" font-size="{appearance.title_font_size}" '
        f'font-weight="bold" fill="{appearance.title_font_color}">{_esc(title)}</text>'
    ]


def _grid_frame_svg(lay: _Layout, appearance: Appearance) -> List[str]:
    out: List[str] = []

    # Optional border (around GRID, offset by border_distance)
    if appearance.add_border:
        d = float(appearance.border_distance or 0.0)
        out.append(
            f'<rect x="{lay.pad - d}" y="{lay.grid_top - d}" '
            f'width="{lay.grid_w + 2 * d}" height="{lay.grid_h + 2 * d}" '
            f'stroke="{appearance.border_color}" stroke-width="{appearance.border_thickness}" fill="none" />'
        )

    # Grid background
    out.append(
        f'<rect x="{lay.pad}" y="{lay.grid_top}" width="{lay.grid_w}" height="{lay.grid_h}" '
        f'fill="{appearance.cell_bg_color}" stroke="none" />'
    )
    return out


def _cell_lines_svg(lay: _Layout, size: int, appearance: Appearance) -> List[str]:
    if not appearance.show_cell_lines:
        return []
    out: List[str] = []
    stroke = appearance.cell_line_color
    sw = appearance.cell_line_thickness
    top = lay.grid_top
    # Vertical lines
    for c in range(size + 1):
        x = lay.pad + c * lay.cell
        out.append(f'<line x1="{x}" y1="{top}" x2="{x}" y2="{top + lay.grid_h}" stroke="{stroke}" stroke-width="{sw}" />')
    # Horizontal lines
    for r in range(size + 1):
        y = top + r * lay.cell
        out.append(f'<line x1="{lay.pad}" y1="{y}" x2="{lay.pad + lay.grid_w}" y2="{y}" stroke="{stroke}" stroke-width="{sw}" />')
    return out


def _letters_svg(rows: List[List[str]], lay: _Layout, appearance: Appearance) -> List[str]:
    font_weight = "bold" if appearance.grid_font_bold else "normal"
    out = [
        f'<g font-family="{_esc(appearance.grid_font_family)}" font-size="{appearance.grid_font_size}" '
        f'font-weight="{font_weight}" fill="{appearance.grid_font_color}">'
    ]
    # Center letters in cells
    txt_dy = int(appearance.grid_font_size * 0.35)
    for r, row in enumerate(rows):
        for c, ch in enumerate(row):
            if ch == BLANK:
                continue
            x = lay.pad + c * lay.cell + lay.cell // 2
            y = lay.grid_top + r * lay.cell + lay.cell // 2 + txt_dy
            out.append(f'<text x="{x}" y="{y}" text-anchor="middle">{_esc(ch)}</text>')
    out.append('</g>')
    return out


def _word_list_height(words: Sequence[str], appearance: Appearance, pad: int) -> int:
    if not words:
        return 0
    line_h = max(12, int(appearance.list_font_size * 1.4))
    cols = _columns(appearance)
    list_rows = (len(words) + cols - 1) // cols
    return list_rows * line_h + pad


def _word_list_svg(words: Sequence[str], lay: _Layout, appearance: Appearance) -> List[str]:
    """Words left to right, wrapping to a new row every `columns` words."""
    if not words:
        return []
    cols = _columns(appearance)
    line_h = max(12, int(appearance.list_font_size * 1.4))
    col_w = lay.grid_w // cols
    anchor = _text_anchor(appearance.list_align)
    lx = lay.pad
    ly = lay.grid_top + lay.grid_h + lay.pad

    out = [
        f'<g font-family="{_esc(appearance.list_font_family)}" font-size="{appearance.list_font_size}" '
        f'fill="{appearance.list_font_color}">'
    ]
    for i, word in enumerate(words):
        col_idx = i % cols
        row_idx = i // cols
        tx = lx + col_idx * col_w
        if anchor == "middle":
            tx += col_w // 2
        elif anchor == "end":
            tx += col_w - 4
        else:
            tx += 4
        ty = ly + (row_idx + 1) * line_h
        out.append(f'<text x="{tx}" y="{ty}" text-anchor="{anchor}">{_esc(word)}</text>')
    out.append('</g>')
    return out


# -----------------------------------------------------------------------------
# Core renderers
# -----------------------------------------------------------------------------
def render_puzzle_svg(
    result: PuzzleResult,
    appearance: Optional[Appearance] = None,
    title: str = "",
    words: Sequence[str] = (),
) -> str:
    """
    Title, the letter grid, and the word list under it.
    `words` are shown as the caller spelled them, not normalized.
    """
    appearance = appearance or Appearance()
    size = result.size
    lay = _layout(size, appearance, title)

    shown = list(words) if appearance.show_word_list else []
    list_h = _word_list_height(shown, appearance, lay.pad)

    total_w = lay.grid_w + lay.pad * 2
    total_h = lay.grid_top + lay.grid_h + list_h + lay.pad

    out = [_svg_open(total_w, total_h)]
    out.extend(_title_svg(title, lay, total_w, appearance))
    out.extend(_grid_frame_svg(lay, appearance))
    out.extend(_cell_lines_svg(lay, size, appearance))
    out.extend(_letters_svg(result.letters, lay, appearance))
    out.extend(_word_list_svg(shown, lay, appearance))
    out.append('</svg>')
    return "\n".join(out)


def render_solution_svg(
    result: PuzzleResult,
    appearance: Optional[Appearance] = None,
    title: str = "",
) -> str:
    """
    Solution SVG: only the target-word letters, with every placed word marked:
      * "line": a stroke from the first letter's center to the last one's
      * "highlight": per-cell rects behind the letters
      * "circle": rotated pill per placed word with semicircular endcaps
    """
    appearance = appearance or Appearance()
    size = result.size
    lay = _layout(size, appearance, title)

    total_w = lay.grid_w + lay.pad * 2
    total_h = lay.grid_top + lay.grid_h + lay.pad

    out = [_svg_open(total_w, total_h)]
    out.extend(_title_svg(title, lay, total_w, appearance))
    out.extend(_grid_frame_svg(lay, appearance))

    mark_style = (appearance.solution_mark_style or "line").lower()
    color = appearance.solution_mark_color

    # --- Highlights behind letters ---
    if mark_style == "highlight":
        for r, row in enumerate(result.solution_letters):
            for c, ch in enumerate(row):
                if ch == BLANK:
                    continue
                x = lay.pad + c * lay.cell + 1
                y = lay.grid_top + r * lay.cell + 1
                out.append(
                    f'<rect x="{x}" y="{y}" width="{lay.cell - 2}" height="{lay.cell - 2}" '
                    f'fill="{color}" fill-opacity="0.8" stroke="none" />'
                )

    out.extend(_cell_lines_svg(lay, size, appearance))

    if mark_style == "line":
        sw = float(appearance.solution_mark_width)
        for pw in result.placed_words:
            x0, y0 = _cell_center(lay, pw.x, pw.y)
            x1, y1 = _cell_center(lay, *pw.end)
            out.append(
                f'<line x1="{x0:.2f}" y1="{y0:.2f}" x2="{x1:.2f}" y2="{y1:.2f}" '
                f'stroke="{color}" stroke-width="{sw:.2f}" stroke-linecap="round" />'
            )
    elif mark_style == "circle":
        out.extend(_pill_bands_svg(result, lay, appearance))

    # --- Letters on top ---
    out.extend(_letters_svg(result.solution_letters, lay, appearance))
    out.append('</svg>')
    return "\n".join(out)


def _pill_bands_svg(result: PuzzleResult, lay: _Layout, appearance: Appearance) -> List[str]:
    out: List[str] = []
    stroke = appearance.solution_mark_color
    sw = float(appearance.solution_mark_width)
    rect_h = max(1.0, float(appearance.solution_circle_band_frac) * lay.cell)
    rx = ry = rect_h * 0.5  # true half-circle endcaps
    pad_len = float(appearance.solution_circle_pad_len)

    for pw in result.placed_words:
        x0, y0 = _cell_center(lay, pw.x, pw.y)
        x1, y1 = _cell_center(lay, *pw.end)

        dx = x1 - x0
        dy = y1 - y0
        dist = math.hypot(dx, dy)

        # Axis unit vector; if single-letter word, pick horizontal
        if dist > 1e-6:
            ux, uy = dx / dist, dy / dist
        else:
            ux, uy = 1.0, 0.0

        # Extend past the end cells: 0.5*cell for axis-aligned, ~0.707*cell at 45 degrees
        ext_each = 0.5 * lay.cell * (abs(ux) + abs(uy)) + pad_len

        rect_w = dist + 2.0 * ext_each
        cx = (x0 + x1) * 0.5
        cy = (y0 + y1) * 0.5
        ang = math.degrees(math.atan2(dy, dx)) if dist > 1e-6 else 0.0

        out.append(
            f'<rect x="{cx - rect_w * 0.5:.2f}" y="{cy - rect_h * 0.5:.2f}" '
            f'width="{rect_w:.2f}" height="{rect_h:.2f}" '
            f'fill="none" stroke="{stroke}" stroke-width="{sw:.2f}" '
            f'rx="{rx:.2f}" ry="{ry:.2f}" transform="rotate({ang:.2f} {cx:.2f} {cy:.2f})" />'
        )
    return out


# -----------------------------------------------------------------------------
# Files
# -----------------------------------------------------------------------------
def save_svg(svg_text: str, path: str) -> None:
    """Write an SVG string to disk."""
    with open(path, "w", encoding="utf-8") as f:
        f.write(svg_text)


def svg_to_png(svg_text: str) -> bytes:
    try:
        from cairosvg import svg2png
        return svg2png(bytestring=svg_text.encode("utf-8"))
    except Exception as e:
        raise RenderError(f"PNG conversion failed: {e}") from e


def save_pdf(svg_text: str, path: str) -> None:
    """One-page PDF from an SVG string (CairoSVG)."""
    try:
        from cairosvg import svg2pdf
        svg2pdf(bytestring=svg_text.encode("utf-8"), write_to=str(path))
    except Exception as e:
        raise RenderError(f"PDF conversion failed for {path}: {e}") from e
    _log(f"pdf: wrote {path}")
