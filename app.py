"""
OptiCut - Guillotine Cutting Plan Optimizer
Streamlit web application for cutting rectangular pieces from stock boards.
"""

import streamlit as st
import logging
import matplotlib.pyplot as plt
import pandas as pd

from data_models import PackingSettings, DEFAULT_KERF
from parsers_csv import (load_piece_requests, piece_requests_from_dataframe, piece_requests_to_dataframe,
                         validate_cutting_inputs)
from optimization_guillotine import run_guillotine_optimization
from simple_reports import calculate_plan_summary, create_report_package, describe_stop_reason
from report_generators import create_excel_report
from pdf_layout_generator import generate_cutting_layout_pdf, render_board_figure
from utils import (setup_logging, get_default_log_level, validate_file_upload, display_plan_metrics,
                   display_piece_legend, display_board_summary, display_error_summary)

logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="OptiCut - Cutting Plan Optimizer",
    page_icon="▦",
    layout="wide"
)


def create_sample_data():
    """Sample piece list in the CSV format the uploader accepts."""
    return """Label,Width,Height,Quantity
Side panel,60,40,8
Shelf,90,30,4
Door,70,45,2
Back,120,60,1"""


def empty_piece_table() -> pd.DataFrame:
    return pd.DataFrame([{'Label': '', 'Width': float('nan'), 'Height': float('nan'), 'Quantity': 1}],
                        columns=['Label', 'Width', 'Height', 'Quantity'])


def main():
    """Main application function."""
    st.title("▦ OptiCut - Cutting Plan Optimizer")
    st.markdown("**Calculate the cutting plan for melamine boards with guillotine cuts**")

    if 'piece_table' not in st.session_state:
        st.session_state.piece_table = empty_piece_table()
    if 'optimization_complete' not in st.session_state:
        st.session_state.optimization_complete = False

    settings = show_settings_sidebar()

    col1, col2 = st.columns([1, 2])
    with col1:
        board_width, board_height = show_board_input()
    with col2:
        piece_table = show_pieces_input()

    if st.button("Calculate cuts", type="primary"):
        run_calculation(board_width, board_height, piece_table, settings)

    if st.session_state.optimization_complete:
        show_results()


def show_settings_sidebar() -> PackingSettings:
    """Display optimization settings and return them."""
    st.sidebar.title("Settings")

    kerf = st.sidebar.number_input(
        "Saw kerf (cm)",
        min_value=0.0,
        max_value=1.0,
        value=DEFAULT_KERF,
        step=0.01,
        format="%.2f",
        help="Material removed by each cut. 0.04 cm = 0.4 mm blade"
    )

    levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
    default_level = get_default_log_level()
    log_level = st.sidebar.selectbox(
        "Log level", levels,
        index=levels.index(default_level) if default_level in levels else 1
    )
    setup_logging(log_level)

    return PackingSettings(kerf=kerf)


def show_board_input():
    """Display board size inputs."""
    st.subheader("□ Board Size")
    board_width = st.number_input("Width (cm)", min_value=0.0, value=244.0, step=1.0)
    board_height = st.number_input("Height (cm)", min_value=0.0, value=122.0, step=1.0)
    return board_width, board_height


def show_pieces_input() -> pd.DataFrame:
    """Display the editable piece table and CSV upload."""
    st.subheader("⊞ Pieces to Cut")

    tab1, tab2 = st.tabs(["📋 Table", "📎 CSV Upload"])

    with tab2:
        uploaded = st.file_uploader("Piece list (CSV)", type=['csv'])
        col1, col2 = st.columns(2)
        with col1:
            if st.button("📁 Load CSV", disabled=uploaded is None):
                if validate_file_upload(uploaded, ['.csv']):
                    try:
                        requests = load_piece_requests(uploaded)
                        st.session_state.piece_table = piece_requests_to_dataframe(requests)
                        st.success(f"Loaded {len(requests)} piece types")
                    except ValueError as e:
                        st.error(f"Could not read the piece list: {e}")
        with col2:
            st.download_button("Download Sample CSV", create_sample_data(), "sample_pieces.csv", "text/csv")

    with tab1:
        edited = st.data_editor(
            st.session_state.piece_table,
            num_rows="dynamic",
            use_container_width=True,
            hide_index=True,
            column_config={
                'Label': st.column_config.TextColumn("Label"),
                'Width': st.column_config.NumberColumn("Width (cm)", min_value=0.0),
                'Height': st.column_config.NumberColumn("Height (cm)", min_value=0.0),
                'Quantity': st.column_config.NumberColumn("Quantity", min_value=1, step=1)
            }
        )

    return edited


def run_calculation(board_width, board_height, piece_table: pd.DataFrame, settings: PackingSettings):
    """Validate the input, run the optimization and build the reports."""
    st.session_state.optimization_complete = False

    try:
        piece_requests = piece_requests_from_dataframe(piece_table)
    except ValueError as e:
        st.error(str(e))
        return

    is_valid, errors = validate_cutting_inputs(board_width, board_height, piece_requests)
    if not is_valid:
        display_error_summary(errors)
        return

    try:
        with st.spinner("Calculating cutting plan..."):
            result = run_guillotine_optimization(board_width, board_height, piece_requests, settings)
            reports = create_report_package(result, piece_requests)
            reports['cutting_layouts.pdf'] = generate_cutting_layout_pdf(result, piece_requests)
            reports['cutting_plan.xlsx'] = create_excel_report(result, piece_requests)
    except Exception as e:
        logger.exception("Optimization failed")
        st.error(f"Optimization failed: {e}")
        return

    st.session_state.optimization_results = result
    st.session_state.piece_requests = piece_requests
    st.session_state.latest_reports = reports
    st.session_state.optimization_complete = True


def show_results():
    """Display the cutting plan, diagrams and downloads."""
    result = st.session_state.optimization_results
    piece_requests = st.session_state.piece_requests
    reports = st.session_state.latest_reports

    st.header("📋 Cutting Plan")
    display_plan_metrics(calculate_plan_summary(result, piece_requests))

    if result.unplaced_items:
        st.warning(f"{len(result.unplaced_items)} pieces could not be placed: {describe_stop_reason(result)}")

    display_piece_legend(piece_requests)

    st.subheader("📥 Download Reports")
    col1, col2, col3 = st.columns(3)
    with col1:
        st.download_button("📄 Cutting Layouts (PDF)", reports['cutting_layouts.pdf'],
                           "cutting_plan.pdf", "application/pdf")
    with col2:
        st.download_button("📊 Detailed Report (Excel)", reports['cutting_plan.xlsx'],
                           "cutting_plan.xlsx",
                           "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")
    with col3:
        st.download_button("📋 Cutting Plan (CSV)", reports['cutting_plan.csv'],
                           "cutting_plan.csv", "text/csv")

    tab1, tab2 = st.tabs(["▦ Boards", "📈 Board Details"])

    with tab1:
        columns = st.columns(2)
        for i, board in enumerate(result.boards):
            with columns[i % 2]:
                fig = render_board_figure(board, i)
                st.pyplot(fig)
                plt.close(fig)

    with tab2:
        display_board_summary(result)
        st.text(reports['cutting_layout.txt'])


if __name__ == "__main__":
    main()
