#!/usr/bin/env python3
"""
Excel report generator for OptiCut cutting plans.
"""

import io
import logging
from typing import List
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from data_models import PackingResult, PieceRequest
from simple_reports import calculate_plan_summary, describe_stop_reason

logger = logging.getLogger(__name__)

HEADER_FILL = PatternFill(start_color="CCCCCC", end_color="CCCCCC", fill_type="solid")


def _write_headers(ws, headers: List[str], row: int = 1):
    for col, header in enumerate(headers, 1):
        cell = ws.cell(row=row, column=col, value=header)
        cell.font = Font(bold=True)
        cell.fill = HEADER_FILL


def _piece_name(request_index: int, piece_requests: List[PieceRequest]) -> str:
    if 0 <= request_index < len(piece_requests) and piece_requests[request_index].label:
        return piece_requests[request_index].label
    return f"Piece {request_index + 1}"


def create_summary_tab(ws, result: PackingResult, piece_requests: List[PieceRequest], order_name: str):
    """Create summary tab with plan totals."""
    title = f"OptiCut Cutting Plan - {order_name}" if order_name else "OptiCut Cutting Plan"
    ws['A1'] = title
    ws['A1'].font = Font(size=16, bold=True)
    ws.merge_cells('A1:D1')

    summary = calculate_plan_summary(result, piece_requests)
    metrics = [
        ("Board Size (cm)", f"{result.board_width:g}x{result.board_height:g}"),
        ("Kerf (cm)", result.settings.kerf),
        ("Total Boards Used", summary['boards']),
        ("Total Pieces", summary['total_pieces']),
        ("Pieces Placed", summary['placed_pieces']),
        ("Pieces Unplaced", summary['unplaced_pieces']),
        ("Total Board Area (cm²)", round(summary['total_board_area'], 2)),
        ("Piece Area (cm²)", round(summary['piece_area'], 2)),
        ("Estimated Waste (%)", round(summary['waste'], 2)),
        ("Average Utilization (%)", round(summary['utilization'], 2))
    ]

    row = 3
    for metric, value in metrics:
        ws[f'A{row}'] = metric
        ws[f'B{row}'] = value
        ws[f'A{row}'].font = Font(bold=True)
        row += 1


def create_board_details_tab(ws, result: PackingResult):
    """Create board details tab, one row per board."""
    _write_headers(ws, ['Board', 'Size (cm)', 'Pieces Count', 'Used Area (cm²)',
                        'Waste Area (cm²)', 'Utilization %', 'Waste %'])

    for row, board in enumerate(result.boards, 2):
        ws.cell(row=row, column=1, value=row - 1)
        ws.cell(row=row, column=2, value=f"{board.width:g}x{board.height:g}")
        ws.cell(row=row, column=3, value=len(board.pieces))
        ws.cell(row=row, column=4, value=round(board.get_used_area(), 2))
        ws.cell(row=row, column=5, value=round(board.get_waste_area(), 2))
        ws.cell(row=row, column=6, value=round(board.get_utilization_percentage(), 2))
        ws.cell(row=row, column=7, value=round(board.get_waste_percentage(), 2))


def create_pieces_list_tab(ws, result: PackingResult, piece_requests: List[PieceRequest]):
    """Create pieces list tab with every placed piece and its position."""
    _write_headers(ws, ['Board', 'Piece', 'Original Width', 'Original Height',
                        'X', 'Y', 'Cut Width', 'Cut Height', 'Rotated'])

    row = 2
    for board_number, board in enumerate(result.boards, 1):
        for piece in board.pieces:
            ws.cell(row=row, column=1, value=board_number)
            ws.cell(row=row, column=2, value=_piece_name(piece.request_index, piece_requests))
            ws.cell(row=row, column=3, value=piece.original_width)
            ws.cell(row=row, column=4, value=piece.original_height)
            ws.cell(row=row, column=5, value=round(piece.x, 4))
            ws.cell(row=row, column=6, value=round(piece.y, 4))
            ws.cell(row=row, column=7, value=piece.width)
            ws.cell(row=row, column=8, value=piece.height)
            ws.cell(row=row, column=9, value="Yes" if piece.rotated else "No")
            row += 1


def create_unplaced_tab(ws, result: PackingResult, piece_requests: List[PieceRequest]):
    """Create unplaced items tab; a single note row when everything was placed."""
    _write_headers(ws, ['Piece', 'Width', 'Height', 'Reason'])

    if not result.unplaced_items:
        ws.cell(row=2, column=1, value="All pieces placed")
        return

    reason = describe_stop_reason(result)
    for row, item in enumerate(result.unplaced_items, 2):
        ws.cell(row=row, column=1, value=_piece_name(item.request_index, piece_requests))
        ws.cell(row=row, column=2, value=item.width)
        ws.cell(row=row, column=3, value=item.height)
        ws.cell(row=row, column=4, value=reason)


def create_excel_report(result: PackingResult, piece_requests: List[PieceRequest],
                        order_name: str = "") -> bytes:
    """
    Create Excel workbook for a cutting plan.

    Args:
        result: Optimization result
        piece_requests: Piece list used for the plan
        order_name: Order name for the summary title

    Returns:
        Workbook content as bytes
    """
    try:
        wb = Workbook()
        wb.remove(wb.active)

        create_summary_tab(wb.create_sheet("Summary", 0), result, piece_requests, order_name)
        create_board_details_tab(wb.create_sheet("Board Details", 1), result)
        create_pieces_list_tab(wb.create_sheet("Pieces List", 2), result, piece_requests)
        create_unplaced_tab(wb.create_sheet("Unplaced Items", 3), result, piece_requests)

        buffer = io.BytesIO()
        wb.save(buffer)
        buffer.seek(0)

        return buffer.getvalue()

    except Exception as e:
        logger.error(f"Excel generation failed: {e}")
        raise
