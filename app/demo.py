"""
Minesweeper Autoplayer - Interactive Demo

Run with: streamlit run app/demo.py
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import random
from typing import Any, Dict, List, Optional, Tuple

import streamlit as st

from autosweeper import AutoPlayer, GameCondition, SolverConfig
from autosweeper.analysis import new_game

COLORS = {
    "0": "#cccccc",
    "1": "#0000ff",
    "2": "#008000",
    "3": "#ff0000",
    "4": "#000080",
    "5": "#800000",
    "6": "#008080",
    "7": "#000000",
    "8": "#808080",
}

METHOD_LABELS = {
    "first_move": "First Move",
    "deterministic": "Deterministic Strategy",
    "enumeration": "Zero-Risk (Enumeration)",
    "uniform": "Zero-Risk (Uniform)",
    "closure": "Mine-Count Closure",
    "guess": "Probabilistic Guess",
}


def render_snapshot(
    snapshot: List[List[str]],
    highlight_cell: Optional[Tuple[int, int]] = None,
) -> str:
    """Render a board snapshot (rows of board.symbol() values) as an HTML table."""
    width = len(snapshot[0]) if snapshot else 0

    # Scale cell size based on board width
    if width >= 30:
        cell_size, font_size = 14, "10px"
    elif width >= 16:
        cell_size, font_size = 20, "13px"
    else:
        cell_size, font_size = 26, "15px"

    html = '<div style="font-family: monospace; line-height: 1.2;">'
    html += '<table style="border-collapse: collapse; margin: auto;">'

    for y, row in enumerate(snapshot):
        html += "<tr>"
        for x, symbol in enumerate(row):
            if symbol == "F":
                display, bg, text_color = "F", "#ffa500", "#ffffff"
            elif symbol == "M":
                display, bg, text_color = "M", "#ffcccc", "#ff0000"
            elif symbol == "!":
                display, bg, text_color = "M", "#ff0000", "#ffffff"
            elif symbol == ".":
                display, bg, text_color = ".", "#c0c0c0", "#666666"
            else:
                display = symbol if symbol != "0" else " "
                bg = "#f0f0f0" if symbol == "0" else "#ffffff"
                text_color = COLORS.get(symbol, "#000000")

            border = "2px solid #ff0000" if (x, y) == highlight_cell else "1px solid #999"
            html += f'''<td style="
                width: {cell_size}px; height: {cell_size}px;
                text-align: center;
                background: {bg};
                border: {border};
                color: {text_color};
                font-weight: bold;
                font-size: {font_size};
            ">{display}</td>'''
        html += "</tr>"

    html += "</table></div>"
    return html


def solve_new_game(
    width: int, height: int, mines: int, config: SolverConfig, seed: Optional[int]
) -> Dict[str, Any]:
    board, first_click = new_game(width, height, mines, random.Random(seed))
    with AutoPlayer(board, config) as player:
        condition, payload = player.solve(first_click=first_click)
    return {
        "condition": condition,
        "payload": payload,
        "final": board.snapshot(reveal_all=True),
    }


def main():
    st.set_page_config(
        page_title="Minesweeper Autoplayer",
        page_icon="💣",
        layout="wide",
    )

    st.title("Minesweeper Autoplayer")
    st.markdown("""
    Deterministic deduction first; exhaustive enumeration of clue-consistent mine
    placements when deduction runs dry.
    """)

    # Sidebar configuration
    st.sidebar.header("Game Configuration")

    preset = st.sidebar.selectbox(
        "Difficulty Preset",
        ["Beginner (9x9, 10)", "Intermediate (16x16, 40)", "Expert (30x16, 99)", "Custom"],
    )

    if preset == "Beginner (9x9, 10)":
        width, height, mines = 9, 9, 10
    elif preset == "Intermediate (16x16, 40)":
        width, height, mines = 16, 16, 40
    elif preset == "Expert (30x16, 99)":
        width, height, mines = 30, 16, 99
    else:
        width = st.sidebar.slider("Width", 5, 30, 16)
        height = st.sidebar.slider("Height", 5, 30, 16)
        max_mines = width * height - 9
        mines = st.sidebar.slider("Mines", 1, max_mines, min(40, max_mines))

    partition_scale = st.sidebar.slider(
        "Partition search scale", 1.0, 5.0, 3.0, 0.5,
        help="Largest log10 count of mine splits across groups that is enumerated.",
    )
    group_scale = st.sidebar.slider(
        "Group search scale", 1.0, 5.0, 4.0, 0.5,
        help="Largest log10 count of placements within one group that is enumerated.",
    )
    seed_text = st.sidebar.text_input("Seed (blank = random)", "")
    seed = int(seed_text) if seed_text.strip().lstrip("-").isdigit() else None

    if "result" not in st.session_state:
        st.session_state.result = None
        st.session_state.current_step = 0

    if st.button("Solve New Board", type="primary"):
        config = SolverConfig(
            partition_scale_limit=partition_scale,
            group_scale_limit=group_scale,
            record_steps=True,
        )
        st.session_state.result = solve_new_game(width, height, mines, config, seed)
        st.session_state.current_step = len(st.session_state.result["payload"]["steps_history"]) - 1
        st.rerun()

    result = st.session_state.result
    if result is None:
        st.info("Click 'Solve New Board' to generate and solve a board.")
        return

    payload = result["payload"]
    steps: List[Dict[str, Any]] = payload["steps_history"]
    board_col, stats_col = st.columns([3, 1])

    with board_col:
        st.subheader("Game Board")
        if steps:
            total_steps = len(steps)
            step_display = st.slider("Step", 1, total_steps, st.session_state.current_step + 1)
            st.session_state.current_step = step_display - 1

            step = steps[st.session_state.current_step]
            action_label = "Reveal" if step["action"] == "reveal" else "Flag"
            method_label = METHOD_LABELS.get(step["method"], step["method"])
            cell = step["cell"]
            st.info(f"**Step {step_display}/{total_steps}**: {action_label} cell "
                    f"({cell[0]}, {cell[1]}) — *{method_label}*")

            is_final_step = st.session_state.current_step == total_steps - 1
            snapshot = result["final"] if is_final_step else step["snapshot"]
            st.markdown(render_snapshot(snapshot, highlight_cell=cell), unsafe_allow_html=True)

        if result["condition"] is GameCondition.WON:
            st.success("Solved! Every mine is flagged.")
        else:
            st.error("Game Over! Hit a mine.")

    with stats_col:
        st.subheader("Solver Statistics")
        metrics: List[Tuple[str, Any]] = [
            ("Result", "Win" if result["condition"] is GameCondition.WON else "Loss"),
            ("Guesses", payload["guess_count"]),
            ("Frames", payload["frames"]),
            ("Cells Revealed", payload["revealed_cells_count"]),
        ]
        for label, value in metrics:
            st.metric(label, value)

        st.markdown("---")
        st.text(f"Deterministic clicks: {payload['deterministic_clicks']}")
        st.text(f"Deterministic flags: {payload['deterministic_flags']}")
        st.text(f"Zero-risk clicks: {payload['zero_risk_clicks']}")
        st.text(f"Closure moves: {payload['closure_moves']}")
        st.text(f"Enumeration passes: {payload['enumeration_passes']}")
        st.text(f"Uniform passes: {payload['uniform_passes']}")


if __name__ == "__main__":
    main()
