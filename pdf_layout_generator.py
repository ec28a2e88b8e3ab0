"""
PDF cutting layout generator for OptiCut.
Draws board diagrams with per-piece colors and labels, for the screen and for PDF export.
"""

import matplotlib.pyplot as plt
import matplotlib.patches as patches
from matplotlib.backends.backend_pdf import PdfPages
import numpy as np
from typing import List, Optional
import logging
import io
from data_models import Board, PieceRequest, PackingResult
from colors import get_piece_color, get_text_color
from simple_reports import calculate_plan_summary, describe_stop_reason

logger = logging.getLogger(__name__)

BOARD_BACKGROUND = '#f1f5f9'
GRID_COLOR = '#e2e8f0'
BORDER_COLOR = '#475569'
TITLE_COLOR = '#0f172a'
MUTED_COLOR = '#64748b'
GRID_STEP = 10  # one grid line every 10 cm
# Pieces smaller than this share of the board in either direction get no label
MIN_LABEL_FRACTION = 0.04


class PDFLayoutGenerator:
    """Generate board diagrams and the PDF cutting plan."""

    def __init__(self, page_size=(11.69, 8.27)):
        # A4 landscape in inches
        self.page_size = page_size

    def draw_board(self, ax, board: Board):
        """Draw one board with its pieces on a matplotlib axis, origin at the top-left."""
        ax.set_xlim(0, board.width)
        ax.set_ylim(board.height, 0)
        ax.set_aspect('equal')

        ax.add_patch(patches.Rectangle(
            (0, 0), board.width, board.height,
            linewidth=0, facecolor=BOARD_BACKGROUND
        ))

        for x in np.arange(GRID_STEP, board.width, GRID_STEP):
            ax.plot([x, x], [0, board.height], color=GRID_COLOR, linewidth=0.4, zorder=1)
        for y in np.arange(GRID_STEP, board.height, GRID_STEP):
            ax.plot([0, board.width], [y, y], color=GRID_COLOR, linewidth=0.4, zorder=1)

        for piece in board.pieces:
            face_color = get_piece_color(piece.request_index)
            ax.add_patch(patches.Rectangle(
                (piece.x, piece.y), piece.width, piece.height,
                linewidth=0.8, edgecolor='white', facecolor=face_color, zorder=2
            ))

            width_fraction = piece.width / board.width
            height_fraction = piece.height / board.height
            if min(width_fraction, height_fraction) < MIN_LABEL_FRACTION:
                continue

            font_size = min(9, max(5, min(width_fraction, height_fraction) * 40))
            ax.text(piece.x + piece.width / 2, piece.y + piece.height / 2, piece.get_label(),
                    ha='center', va='center', fontsize=font_size,
                    color=get_text_color(face_color),
                    rotation=90 if piece.rotated else 0, zorder=3)

        ax.add_patch(patches.Rectangle(
            (0, 0), board.width, board.height,
            linewidth=1.2, edgecolor=BORDER_COLOR, facecolor='none', zorder=4
        ))
        ax.set_xticks([])
        ax.set_yticks([])
        for spine in ax.spines.values():
            spine.set_visible(False)

    def render_board_figure(self, board: Board, board_index: int, figsize=(5, 4)):
        """
        Create a figure showing one board, for on-screen display.

        Args:
            board: Board to draw
            board_index: Zero-based position of the board in the plan
            figsize: Figure size in inches

        Returns:
            matplotlib Figure; the caller closes it
        """
        fig, ax = plt.subplots(1, 1, figsize=figsize)
        fig.patch.set_facecolor('white')
        self.draw_board(ax, board)
        ax.set_title(f"Board {board_index + 1} - {board.width:g} × {board.height:g} cm - "
                     f"{len(board.pieces)} pieces", fontsize=9, color=TITLE_COLOR)
        ax.set_xlabel(f"Utilization: {board.get_utilization_percentage():.1f}%   |   "
                      f"Waste: {board.get_waste_percentage():.1f}%", fontsize=8, color=MUTED_COLOR)
        fig.tight_layout()
        return fig

    def generate_cutting_layouts_pdf(self, result: PackingResult, piece_requests: List[PieceRequest],
                                     order_name: str = "", output_path: Optional[str] = None) -> bytes:
        """Generate the PDF: a summary page then one page per board."""
        pdf_buffer = io.BytesIO()

        try:
            with PdfPages(pdf_buffer) as pdf:
                self._create_summary_page(pdf, result, piece_requests, order_name)
                for board_idx, board in enumerate(result.boards):
                    self._create_board_layout_page(pdf, board, board_idx, piece_requests)

            pdf_bytes = pdf_buffer.getvalue()
            pdf_buffer.close()

            if output_path:
                with open(output_path, 'wb') as f:
                    f.write(pdf_bytes)
                logger.info(f"PDF cutting layout saved to {output_path}")

            return pdf_bytes

        except Exception as e:
            logger.error(f"Error generating PDF layout: {e}")
            raise

    def _create_summary_page(self, pdf: PdfPages, result: PackingResult,
                             piece_requests: List[PieceRequest], order_name: str):
        fig = plt.figure(figsize=self.page_size)
        fig.patch.set_facecolor('white')

        title = "Cutting Plan"
        if order_name:
            title = f"{title} - {order_name}"
        fig.text(0.05, 0.93, title, fontsize=18, fontweight='bold', color=TITLE_COLOR)
        fig.text(0.05, 0.89, f"Board: {result.board_width:g} × {result.board_height:g} cm   "
                             f"Kerf: {result.settings.kerf:g} cm", fontsize=9, color=MUTED_COLOR)

        summary = calculate_plan_summary(result, piece_requests)
        stats = [
            (str(summary['boards']), "Boards" if summary['boards'] != 1 else "Board"),
            (str(summary['total_pieces']), "Total pieces"),
            (f"{summary['waste']:.1f}%", "Estimated waste"),
            (f"{summary['piece_area']:.0f}", "Piece area (cm²)")
        ]
        for i, (value, label) in enumerate(stats):
            x = 0.05 + i * 0.2
            fig.add_artist(patches.FancyBboxPatch(
                (x, 0.74), 0.18, 0.11, boxstyle="round,pad=0.005",
                transform=fig.transFigure, facecolor='#f8fafc', edgecolor=GRID_COLOR
            ))
            fig.text(x + 0.09, 0.80, value, ha='center', fontsize=16, fontweight='bold', color='#2563eb')
            fig.text(x + 0.09, 0.76, label, ha='center', fontsize=8, color=MUTED_COLOR)

        fig.text(0.05, 0.68, "Piece list", fontsize=12, fontweight='bold', color=TITLE_COLOR)

        if piece_requests:
            table_ax = fig.add_axes([0.05, 0.08, 0.9, 0.58])
            table_ax.axis('off')
            headers = ['#', 'Color', 'Piece', 'Width (cm)', 'Height (cm)', 'Quantity',
                       'Unit area (cm²)', 'Total area (cm²)']
            rows = [[
                str(r.request_index + 1), '', r.label or '-', f"{r.width:g}", f"{r.height:g}",
                str(r.quantity), f"{r.get_area():.2f}", f"{r.get_total_area():.2f}"
            ] for r in piece_requests]

            table = table_ax.table(cellText=rows, colLabels=headers, cellLoc='center', loc='upper center')
            table.auto_set_font_size(False)
            table.set_fontsize(8)
            table.scale(1, 1.3)

            for i in range(len(headers)):
                table[(0, i)].set_facecolor('#f1f5f9')
                table[(0, i)].set_text_props(weight='bold')
            for row_idx, request in enumerate(piece_requests, 1):
                table[(row_idx, 1)].set_facecolor(get_piece_color(request.request_index))

        if result.unplaced_items:
            fig.text(0.05, 0.04,
                     f"{len(result.unplaced_items)} pieces could not be placed: {describe_stop_reason(result)}",
                     fontsize=9, color='#dc2626')

        pdf.savefig(fig, facecolor='white')
        plt.close(fig)

    def _create_board_layout_page(self, pdf: PdfPages, board: Board, board_idx: int,
                                  piece_requests: List[PieceRequest]):
        fig = plt.figure(figsize=self.page_size)
        fig.patch.set_facecolor('white')

        fig.text(0.05, 0.94, f"Board {board_idx + 1}", fontsize=13, fontweight='bold', color=TITLE_COLOR)
        fig.text(0.16, 0.94, f"{board.width:g} × {board.height:g} cm  -  {len(board.pieces)} pieces",
                 fontsize=9, color=MUTED_COLOR)

        ax = fig.add_axes([0.05, 0.1, 0.68, 0.8])
        self.draw_board(ax, board)

        self._add_board_legend(fig, board, piece_requests)

        fig.text(0.05, 0.05,
                 f"Utilization: {board.get_utilization_percentage():.1f}%   |   "
                 f"Waste: {board.get_waste_percentage():.1f}%   |   "
                 f"Used area: {board.get_used_area():.1f} / {board.get_total_area():.1f} cm²",
                 fontsize=8, color=MUTED_COLOR)

        pdf.savefig(fig, facecolor='white')
        plt.close(fig)

    def _add_board_legend(self, fig, board: Board, piece_requests: List[PieceRequest]):
        """List the piece types on this board with their counts."""
        legend_x = 0.76
        legend_y = 0.88
        fig.text(legend_x, legend_y, "Pieces on this board", fontsize=9, fontweight='bold', color=TITLE_COLOR)
        legend_y -= 0.05

        for request_index, count in board.count_by_request().items():
            if legend_y < 0.1:
                break
            fig.add_artist(patches.Rectangle(
                (legend_x, legend_y), 0.015, 0.02, transform=fig.transFigure,
                facecolor=get_piece_color(request_index), edgecolor='none'
            ))
            if 0 <= request_index < len(piece_requests):
                request = piece_requests[request_index]
                name = f"{request.width:g} × {request.height:g} cm"
            else:
                name = f"Piece {request_index + 1}"
            fig.text(legend_x + 0.025, legend_y + 0.005, name, fontsize=8, color=TITLE_COLOR)
            fig.text(legend_x + 0.025, legend_y - 0.02, f"{count} units", fontsize=7, color=MUTED_COLOR)
            legend_y -= 0.06


def render_board_figure(board: Board, board_index: int, figsize=(5, 4)):
    """Create an on-screen figure for one board."""
    return PDFLayoutGenerator().render_board_figure(board, board_index, figsize)


def generate_cutting_layout_pdf(result: PackingResult, piece_requests: List[PieceRequest],
                                order_name: str = "", output_path: Optional[str] = None) -> bytes:
    """Generate PDF cutting layouts using the layout generator."""
    generator = PDFLayoutGenerator()
    return generator.generate_cutting_layouts_pdf(result, piece_requests, order_name, output_path)
