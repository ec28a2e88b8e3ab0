"""
Utility functions for OptiCut guillotine cutting optimization tool.
"""

import logging
import os
from typing import List
import pandas as pd
import streamlit as st
from data_models import PackingResult, PieceRequest
from colors import get_piece_color


def setup_logging(log_level: str = "INFO") -> None:
    """
    Set up logging configuration for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=log_format,
        handlers=[
            logging.StreamHandler(),
        ],
        force=True
    )

    # Set specific logger levels
    logging.getLogger('matplotlib').setLevel(logging.WARNING)
    logging.getLogger('PIL').setLevel(logging.WARNING)


def get_default_log_level() -> str:
    """Log level from the OPTICUT_LOG_LEVEL environment variable, INFO if unset."""
    level = os.environ.get("OPTICUT_LOG_LEVEL", "INFO").upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        return "INFO"
    return level


def validate_file_upload(uploaded_file, expected_extensions: list) -> bool:
    """
    Validate uploaded file type and size.

    Args:
        uploaded_file: Streamlit uploaded file object
        expected_extensions: List of allowed file extensions

    Returns:
        True if file is valid, False otherwise
    """
    if uploaded_file is None:
        return False

    file_extension = os.path.splitext(uploaded_file.name)[1].lower()
    if file_extension not in expected_extensions:
        st.error(f"Invalid file type. Expected: {', '.join(expected_extensions)}")
        return False

    # Piece lists are small, 5MB is plenty
    max_size = 5 * 1024 * 1024
    if uploaded_file.size > max_size:
        st.error("File size too large. Maximum size is 5MB.")
        return False

    return True


def format_area(area_cm2: float) -> str:
    """
    Format area for display with appropriate units.

    Args:
        area_cm2: Area in square centimeters

    Returns:
        Formatted area string
    """
    if area_cm2 >= 10_000:
        return f"{area_cm2 / 10_000:.2f} m²"
    return f"{area_cm2:.0f} cm²"


def format_percentage(value: float) -> str:
    """
    Format percentage for display.

    Args:
        value: Percentage value (0-100)

    Returns:
        Formatted percentage string
    """
    return f"{value:.1f}%"


def display_plan_metrics(summary: dict):
    """
    Display plan metrics in Streamlit columns.

    Args:
        summary: Output of simple_reports.calculate_plan_summary
    """
    col1, col2, col3, col4 = st.columns(4)

    with col1:
        st.metric("Boards Needed", summary['boards'])

    with col2:
        st.metric("Pieces Placed", f"{summary['placed_pieces']}/{summary['total_pieces']}")

    with col3:
        st.metric("Estimated Waste", format_percentage(summary['waste']))

    with col4:
        st.metric("Piece Area", format_area(summary['piece_area']))


def display_piece_legend(piece_requests: List[PieceRequest]):
    """
    Display the color legend for piece types.

    Args:
        piece_requests: Pieces of the current plan
    """
    st.markdown("**Piece legend**")
    items = []
    for request in piece_requests:
        color = get_piece_color(request.request_index)
        name = f"{request.label}: " if request.label else ""
        items.append(
            f'<span style="display:inline-block;margin:2px 12px 2px 0">'
            f'<span style="display:inline-block;width:12px;height:12px;background:{color};'
            f'border-radius:2px;margin-right:6px"></span>'
            f'{name}{request.width:g} × {request.height:g} cm ({request.quantity} units)</span>'
        )
    st.markdown("".join(items), unsafe_allow_html=True)


def display_board_summary(result: PackingResult):
    """
    Display board summary table in Streamlit.

    Args:
        result: Optimization result
    """
    if not result.boards:
        st.info("No boards to display.")
        return

    board_data = []
    for i, board in enumerate(result.boards, 1):
        board_data.append({
            'Board': i,
            'Dimensions': f"{board.width:g}×{board.height:g} cm",
            'Pieces': len(board.pieces),
            'Utilization': format_percentage(board.get_utilization_percentage()),
            'Waste': format_percentage(board.get_waste_percentage()),
            'Waste Area': format_area(board.get_waste_area())
        })

    st.dataframe(pd.DataFrame(board_data), use_container_width=True, hide_index=True)


def display_error_summary(errors: List[str]):
    """
    Display input validation errors.

    Args:
        errors: Messages from parsers_csv.validate_cutting_inputs
    """
    st.error(f"Found {len(errors)} problems in the input:")
    for message in errors:
        st.markdown(f"- {message}")
