import io, zipfile, random
import streamlit as st
import re
from pathlib import Path


def load_css(path: str | Path) -> None:
    css_path = Path(path)
    css = css_path.read_text(encoding="utf-8")
    st.markdown(f"<style>{css}</style>", unsafe_allow_html=True)


# ---- preview helper: scale an SVG to a target pixel width (keeps aspect) ----

def _scale_svg_for_preview(svg_text: str, target_width_px: int) -> tuple[str, int]:
    """
    Returns (scaled_svg_text, new_height_px).
    Only used for UI preview; original SVGs stay full size for ZIP/PNG/PDF.
    """
    s = svg_text
    m = re.search(r'viewBox="0\s+0\s+([\d.]+)\s+([\d.]+)"', s)
    if not m:
        return s, 600  # fallback
    vw, vh = float(m.group(1)), float(m.group(2))

    scale = max(0.05, float(target_width_px) / max(1.0, vw))
    new_h = max(50, int(round(vh * scale)))

    # rewrite width/height only on the <svg ...> tag
    s = re.sub(r'(<svg\b[^>]*\bwidth=")[^"]+(")',  rf'\g<1>{int(target_width_px)}\g<2>', s, count=1)
    s = re.sub(r'(<svg\b[^>]*\bheight=")[^"]+(")', rf'\g<1>{new_h}\g<2>',            s, count=1)
    if 'preserveAspectRatio' not in s[:400]:
        s = re.sub(r'<svg\b', '<svg preserveAspectRatio="xMidYMid meet"', s, count=1)
    return s, new_h


def _words_from_text(text: str) -> list[str]:
    """One word (or phrase) per line; commas also split."""
    out = []
    for line in (text or "").splitlines():
        for part in line.split(","):
            part = part.strip()
            if part:
                out.append(part)
    return out


st.set_page_config(page_title="Word Search Generator", layout="wide")
# If styles.css is next to app.py:
load_css(Path(__file__).with_name("styles.css"))
st.title("Word Search Generator")


# --- Controls in the sidebar (clean + compact) ---
with st.sidebar:
    tab_create, tab_settings = st.tabs(["Create Puzzle", "Settings"])

    # ---------------------------
    # TAB 1: Create Puzzle
    # ---------------------------
    with tab_create:
        title = st.text_input("Title", "Word Search")

        r1c1, r1c2 = st.columns(2)
        with r1c1:
            grid_size = st.number_input("Grid size (0 = auto)", 0, 60, 0, format="%d")
        with r1c2:
            columns = st.number_input("Word list columns", 1, 10, 5, format="%d")

        difficulty = st.slider("Difficulty", 1, 9, 3)
        seed = st.text_input("Seed (optional)", "")

        words_text = st.text_area("Words (one per line)", "apple\nbanana\ncherry")
        dict_file = st.file_uploader("Dictionary (one word per line)", type=["txt"])

        go = st.button("Generate", type="primary", use_container_width=True, disabled=(dict_file is None))

    # ---------------------------
    # TAB 2: Settings
    # ---------------------------
    with tab_settings:
        st.caption("Output formats")
        make_png = st.checkbox("Also make PNG", value=True)
        make_pdf = st.checkbox("Also make PDF", value=False)

        st.caption("Solution")
        mark_style = st.selectbox("Mark answers with", ["line", "highlight", "circle"])
        show_lines = st.checkbox("Draw cell lines", value=False)
        verbose = st.checkbox("Verbose log", value=False)

        st.caption("Preview")
        size_label = st.select_slider("Preview size", options=["Small", "Medium", "Large"], value="Medium")
        PREVIEW_W = {"Small": 420, "Medium": 560, "Large": 720}[size_label]


if go:
    import puzzle_engine as eng
    import svg_renderer as svg
    from puzzle_config import PuzzleConfig
    from text_output import format_puzzle
    from wordsearch import generate_autosized

    log_lines: list[str] = []
    eng.set_logger(log_lines.append)
    svg.set_logger(log_lines.append)

    words = _words_from_text(words_text)
    config = PuzzleConfig(
        title=title,
        size=int(grid_size),
        columns=int(columns),
        difficulty=int(difficulty),
        words=words,
        output_basename="puzzle",
    )

    try:
        dictionary = eng.Dictionary.from_lines(
            io.TextIOWrapper(dict_file, encoding="utf-8-sig")
        )
        rng = random.Random(seed or None)
        result = generate_autosized(config, verbose=verbose, rng=rng, dictionary=dictionary)
    except eng.PuzzleError as e:
        st.error(f"Puzzle generation failed: {e}")
        if log_lines:
            st.code("\n".join(log_lines))
        st.stop()

    look = svg.Appearance(columns=config.columns, solution_mark_style=mark_style, show_cell_lines=show_lines)
    if mark_style != "line":
        look.solution_mark_color = "#D94242"
        look.solution_mark_width = 2.0
    puz_svg = svg.render_puzzle_svg(result, look, title=config.title, words=config.words)
    sol_svg = svg.render_solution_svg(result, look, title=config.title)

    st.caption(f"{result.size}x{result.size} grid, {len(result.placed_words)} words placed")

    # --- Previews (tabs) ---
    tab_puz, tab_sol, tab_log = st.tabs(["Puzzle", "Solution", "Log"])

    with tab_puz:
        svgp, hp = _scale_svg_for_preview(puz_svg, PREVIEW_W)
        st.components.v1.html(svgp, height=hp + 6, scrolling=False)

    with tab_sol:
        svgs_prev, hs = _scale_svg_for_preview(sol_svg, PREVIEW_W)
        st.components.v1.html(svgs_prev, height=hs + 6, scrolling=False)

    with tab_log:
        st.code("\n".join(log_lines) or "(empty)")

    # --- ZIP outputs ---
    try:
        mem = io.BytesIO()
        with zipfile.ZipFile(mem, "w", zipfile.ZIP_DEFLATED) as zf:
            text = format_puzzle(result) + "\n\n" + format_puzzle(result, solution=True) + "\n"
            zf.writestr("puzzle.txt", text)

            pages = [("puzzle.svg", puz_svg), ("solution.svg", sol_svg)]
            for name, s in pages:
                zf.writestr(name, s)

            if make_png or make_pdf:
                from cairosvg import svg2pdf
                for name, s in pages:
                    try:
                        if make_png:
                            zf.writestr(name.replace(".svg", ".png"), svg.svg_to_png(s))
                    except Exception as e:
                        zf.writestr(name.replace(".svg", ".PNG_ERROR.txt"),
                                    (f"PNG conversion failed for {name}:\n{e}").encode("utf-8"))

                    try:
                        if make_pdf:
                            zf.writestr(name.replace(".svg", ".pdf"),
                                        svg2pdf(bytestring=s.encode("utf-8")))
                    except Exception as e:
                        zf.writestr(name.replace(".svg", ".PDF_ERROR.txt"),
                                    (f"PDF conversion failed for {name}:\n{e}").encode("utf-8"))

        mem.seek(0)
        st.download_button("Download ZIP", data=mem.read(), file_name="wordsearch.zip", mime="application/zip")
    except Exception as e:
        st.error("Failed to package outputs")
        st.exception(e)
        st.stop()
