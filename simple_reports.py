"""
Simple report generation for OptiCut without pandas/matplotlib dependencies.
Creates plan statistics plus text and CSV reports for optimization results.
"""

import csv
import io
from typing import List, Dict, Any
from data_models import Board, PieceRequest, PackingResult, STOP_INFEASIBLE_ITEM, STOP_BOARD_LIMIT


def calculate_board_statistics(board: Board) -> Dict[str, Any]:
    """
    Calculate area statistics for one board.

    Returns:
        Dictionary with total/used/waste area and utilization/waste percentages
    """
    return {
        'pieces': len(board.pieces),
        'total_area': board.get_total_area(),
        'used_area': board.get_used_area(),
        'waste_area': board.get_waste_area(),
        'utilization': board.get_utilization_percentage(),
        'waste': board.get_waste_percentage()
    }


def calculate_plan_summary(result: PackingResult, piece_requests: List[PieceRequest]) -> Dict[str, Any]:
    """
    Calculate aggregate statistics for a cutting plan.

    Args:
        result: Optimization result
        piece_requests: Piece list the plan was computed for

    Returns:
        Dictionary with board, piece and area totals. Waste is the share of
        board area not covered by placed pieces.
    """
    total_board_area = result.get_total_board_area()
    piece_area = sum(request.get_total_area() for request in piece_requests)
    total_pieces = sum(request.quantity for request in piece_requests)

    used_area = result.get_total_used_area()
    waste = ((total_board_area - used_area) / total_board_area * 100) if total_board_area > 0 else 0.0

    return {
        'boards': len(result.boards),
        'total_pieces': total_pieces,
        'placed_pieces': result.get_placed_count(),
        'unplaced_pieces': len(result.unplaced_items),
        'total_board_area': total_board_area,
        'piece_area': piece_area,
        'used_area': used_area,
        'waste': waste,
        'utilization': result.get_utilization_percentage(),
        'stop_reason': result.stop_reason
    }


def describe_stop_reason(result: PackingResult) -> str:
    """Human-readable explanation of why pieces were left unplaced, or '' if none were."""
    if not result.unplaced_items:
        return ""
    if result.stop_reason == STOP_INFEASIBLE_ITEM:
        return "A piece is larger than the board in both orientations"
    if result.stop_reason == STOP_BOARD_LIMIT:
        return f"Board limit of {result.settings.max_boards} reached"
    return "Could not fit on any board"


def _request_name(request_index: int, piece_requests: List[PieceRequest]) -> str:
    if 0 <= request_index < len(piece_requests) and piece_requests[request_index].label:
        return piece_requests[request_index].label
    return f"Piece {request_index + 1}"


def generate_cutting_layout_text(result: PackingResult, piece_requests: List[PieceRequest],
                                 order_name: str = "") -> str:
    """
    Generate text-based cutting layout report.

    Args:
        result: Optimization result
        piece_requests: Piece list used for the plan
        order_name: Order name to include in report header

    Returns:
        Formatted text report
    """
    report_lines = []

    if order_name:
        report_lines.append(f"CUTTING LAYOUT REPORT - ORDER: {order_name}")
    else:
        report_lines.append("CUTTING LAYOUT REPORT")

    report_lines.append("=" * 60)
    report_lines.append("")

    summary = calculate_plan_summary(result, piece_requests)
    report_lines.append("SUMMARY:")
    report_lines.append(f"Board Size: {result.board_width:g} x {result.board_height:g} cm")
    report_lines.append(f"Kerf: {result.settings.kerf:g} cm")
    report_lines.append(f"Total Boards: {summary['boards']}")
    report_lines.append(f"Total Pieces: {summary['total_pieces']}")
    report_lines.append(f"Placed Pieces: {summary['placed_pieces']}")
    report_lines.append(f"Estimated Waste: {summary['waste']:.1f}%")
    report_lines.append("")

    for i, board in enumerate(result.boards, 1):
        report_lines.append(f"BOARD {i}")
        report_lines.append(f"Size: {board.width:g} x {board.height:g} cm")
        report_lines.append(f"Utilization: {board.get_utilization_percentage():.1f}%")
        report_lines.append(f"Waste: {board.get_waste_percentage():.1f}%")
        report_lines.append(f"Pieces Count: {len(board.pieces)}")
        report_lines.append("")

        if board.pieces:
            report_lines.append("PIECES ON BOARD:")
            report_lines.append("Piece".ljust(20) + "Dimensions".ljust(15) + "Position".ljust(20) + "Notes")
            report_lines.append("-" * 70)

            for piece in board.pieces:
                name = _request_name(piece.request_index, piece_requests)[:19]
                position = f"({piece.x:.2f},{piece.y:.2f})"
                notes = "Rotated" if piece.rotated else ""
                report_lines.append(
                    name.ljust(20) +
                    piece.get_label().ljust(15) +
                    position.ljust(20) +
                    notes
                )

        report_lines.append("")
        report_lines.append("-" * 60)
        report_lines.append("")

    if result.unplaced_items:
        report_lines.append(f"UNPLACED PIECES: {len(result.unplaced_items)}")
        report_lines.append(f"Reason: {describe_stop_reason(result)}")
        for item in result.unplaced_items:
            name = _request_name(item.request_index, piece_requests)
            report_lines.append(f"  {name}: {item.width:g}×{item.height:g}")

    return "\n".join(report_lines)


def generate_cutting_plan_csv(result: PackingResult, piece_requests: List[PieceRequest],
                              order_name: str = "") -> str:
    """
    Generate CSV report with the placed pieces, unplaced pieces and board summary.

    Returns:
        CSV content as string
    """
    output = io.StringIO()

    if order_name:
        output.write(f"# OptiCut Cutting Plan - Order: {order_name}\n")
    else:
        output.write("# OptiCut Cutting Plan\n")

    summary = calculate_plan_summary(result, piece_requests)
    output.write(f"# Total Boards: {summary['boards']}\n")
    output.write(f"# Unplaced Pieces: {summary['unplaced_pieces']}\n")
    output.write(f"# Estimated Waste: {summary['waste']:.1f}%\n")
    output.write("#\n")

    writer = csv.writer(output)
    writer.writerow([
        'Board', 'Piece', 'Original Width (cm)', 'Original Height (cm)',
        'X (cm)', 'Y (cm)', 'Cut Width (cm)', 'Cut Height (cm)', 'Rotated'
    ])

    for board_number, board in enumerate(result.boards, 1):
        for piece in board.pieces:
            writer.writerow([
                board_number,
                _request_name(piece.request_index, piece_requests),
                piece.original_width,
                piece.original_height,
                round(piece.x, 4),
                round(piece.y, 4),
                piece.width,
                piece.height,
                'Yes' if piece.rotated else 'No'
            ])

    if result.unplaced_items:
        output.write("\n# UNPLACED PIECES\n")
        writer.writerow(['Piece', 'Width (cm)', 'Height (cm)', 'Reason'])
        reason = describe_stop_reason(result)
        for item in result.unplaced_items:
            writer.writerow([
                _request_name(item.request_index, piece_requests),
                item.width,
                item.height,
                reason
            ])

    output.write("\n# BOARD SUMMARY\n")
    writer.writerow(['Board', 'Width (cm)', 'Height (cm)', 'Pieces Count', 'Utilization (%)', 'Waste (%)'])
    for board_number, board in enumerate(result.boards, 1):
        writer.writerow([
            board_number,
            board.width,
            board.height,
            len(board.pieces),
            f"{board.get_utilization_percentage():.1f}",
            f"{board.get_waste_percentage():.1f}"
        ])

    return output.getvalue()


def generate_piece_summary_csv(result: PackingResult, piece_requests: List[PieceRequest]) -> str:
    """
    Generate per piece type summary as CSV.

    Returns:
        CSV content as string
    """
    output = io.StringIO()
    writer = csv.writer(output)

    placed_counts: Dict[int, int] = {}
    for board in result.boards:
        for request_index, count in board.count_by_request().items():
            placed_counts[request_index] = placed_counts.get(request_index, 0) + count

    writer.writerow(['#', 'Piece', 'Width (cm)', 'Height (cm)', 'Quantity', 'Placed',
                     'Unit Area (cm²)', 'Total Area (cm²)'])
    for request in piece_requests:
        writer.writerow([
            request.request_index + 1,
            _request_name(request.request_index, piece_requests),
            request.width,
            request.height,
            request.quantity,
            placed_counts.get(request.request_index, 0),
            f"{request.get_area():.2f}",
            f"{request.get_total_area():.2f}"
        ])

    return output.getvalue()


def create_report_package(result: PackingResult, piece_requests: List[PieceRequest],
                          order_name: str = "") -> Dict[str, str]:
    """
    Create a package of all text reports.

    Returns:
        Dictionary with report names as keys and content as values
    """
    return {
        'cutting_layout.txt': generate_cutting_layout_text(result, piece_requests, order_name),
        'cutting_plan.csv': generate_cutting_plan_csv(result, piece_requests, order_name),
        'piece_summary.csv': generate_piece_summary_csv(result, piece_requests)
    }
