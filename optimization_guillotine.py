"""
Guillotine optimization core for OptiCut.
Packs rectangular pieces onto stock boards with edge-to-edge cuts, using a
Best-Area-Fit placement heuristic and kerf-aware guillotine splits.
"""

import logging
from typing import List, Optional, Tuple
from data_models import (PieceRequest, Item, FreeRect, PlacedPiece, Board, PackingSettings,
                         PackingResult, InvalidDimensionsError, DEFAULT_KERF, MIN_RECT_SIZE,
                         STOP_COMPLETE, STOP_INFEASIBLE_ITEM, STOP_BOARD_LIMIT)

logger = logging.getLogger(__name__)


def expand_piece_requests(piece_requests: List[PieceRequest]) -> List[Item]:
    """
    Expand piece requests into one Item per unit of quantity.

    Args:
        piece_requests: Requests in user order

    Returns:
        Flat list of items, in request order
    """
    items = []
    for request in piece_requests:
        for _ in range(request.quantity):
            items.append(Item(request.width, request.height, request.request_index))
    return items


def sort_items_by_area(items: List[Item]) -> List[Item]:
    """Largest area first. sorted() is stable, so equal areas keep expansion order."""
    return sorted(items, key=lambda item: item.width * item.height, reverse=True)


def find_best_fit(free_rects: List[FreeRect], width: float,
                  height: float) -> Optional[Tuple[int, bool]]:
    """
    Find the free rectangle for a piece using the Best-Area-Fit heuristic.

    Every rectangle is checked in the normal orientation and then rotated 90
    degrees. The score is the area of the free rectangle; only a strictly
    smaller score replaces the current best, so on ties the normal orientation
    and the lower index win.

    Args:
        free_rects: Current free rectangle pool of the board
        width, height: Requested piece dimensions

    Returns:
        Tuple of (rect_index, rotated), or None if the piece fits nowhere
    """
    best_score = float('inf')
    best_index = -1
    best_rotated = False

    for index, rect in enumerate(free_rects):
        score = rect.width * rect.height

        if rect.fits(width, height):
            if score < best_score:
                best_score = score
                best_index = index
                best_rotated = False

        if rect.fits(height, width):
            if score < best_score:
                best_score = score
                best_index = index
                best_rotated = True

    if best_index == -1:
        return None
    return best_index, best_rotated


def guillotine_split(rect: FreeRect, placed_width: float, placed_height: float,
                     kerf: float = DEFAULT_KERF, min_rect_size: float = MIN_RECT_SIZE) -> List[FreeRect]:
    """
    Split a free rectangle after placing a piece flush at its (x, y) corner.

    The kerf is deducted from both remainders. Of the horizontal split (bottom
    strip spans the full width) and the vertical split (right strip spans the
    full height), the one whose larger remainder is bigger is used; ties go to
    the horizontal split.

    Args:
        rect: Free rectangle the piece was placed in
        placed_width, placed_height: Footprint of the placed piece
        kerf: Material removed by each cut
        min_rect_size: Remainders with a side at or below this are not emitted

    Returns:
        Zero, one or two remainder rectangles, right one first
    """
    remain_w = rect.width - placed_width - kerf
    remain_h = rect.height - placed_height - kerf

    horiz_score = max(
        remain_w * placed_height if remain_w > 0 else 0,
        rect.width * remain_h if remain_h > 0 else 0
    )
    vert_score = max(
        remain_w * rect.height if remain_w > 0 else 0,
        placed_width * remain_h if remain_h > 0 else 0
    )

    splits = []
    if horiz_score >= vert_score:
        if remain_w > min_rect_size:
            splits.append(FreeRect(rect.x + placed_width + kerf, rect.y, remain_w, placed_height))
        if remain_h > min_rect_size:
            splits.append(FreeRect(rect.x, rect.y + placed_height + kerf, rect.width, remain_h))
    else:
        if remain_w > min_rect_size:
            splits.append(FreeRect(rect.x + placed_width + kerf, rect.y, remain_w, rect.height))
        if remain_h > min_rect_size:
            splits.append(FreeRect(rect.x, rect.y + placed_height + kerf, placed_width, remain_h))

    return splits


def pack_single_board(board_width: float, board_height: float, items: List[Item],
                      settings: Optional[PackingSettings] = None) -> Tuple[List[PlacedPiece], List[Item]]:
    """
    Place as many items as possible on one fresh board, in the given order.

    Args:
        board_width, board_height: Board dimensions
        items: Items to try, already ordered
        settings: Kerf and pruning settings

    Returns:
        Tuple of (placed pieces, items that did not fit)
    """
    settings = settings or PackingSettings()
    free_rects = [FreeRect(0.0, 0.0, board_width, board_height)]
    placed: List[PlacedPiece] = []
    unplaced: List[Item] = []

    for item in items:
        fit = find_best_fit(free_rects, item.width, item.height)
        if fit is None:
            unplaced.append(item)
            continue

        rect_index, rotated = fit
        rect = free_rects[rect_index]
        placed_width = item.height if rotated else item.width
        placed_height = item.width if rotated else item.height

        placed.append(PlacedPiece(
            x=rect.x,
            y=rect.y,
            width=placed_width,
            height=placed_height,
            request_index=item.request_index,
            original_width=item.width,
            original_height=item.height,
            rotated=rotated
        ))

        # Replace the consumed rectangle in place so untouched rects keep their order
        free_rects[rect_index:rect_index + 1] = guillotine_split(
            rect, placed_width, placed_height, settings.kerf, settings.min_rect_size
        )
        free_rects = [r for r in free_rects if r.is_usable(settings.min_rect_size)]

    return placed, unplaced


def _check_dimensions(board_width: float, board_height: float, piece_requests: List[PieceRequest]):
    if not board_width > 0 or not board_height > 0:
        raise InvalidDimensionsError(f"Invalid board dimensions: {board_width}x{board_height}")
    for request in piece_requests:
        if not request.width > 0 or not request.height > 0:
            raise InvalidDimensionsError(
                f"Invalid piece dimensions for piece #{request.request_index + 1}: "
                f"{request.width}x{request.height}"
            )
        if not request.has_valid_quantity():
            raise InvalidDimensionsError(
                f"Invalid quantity for piece #{request.request_index + 1}: {request.quantity}"
            )


def run_guillotine_optimization(board_width: float, board_height: float,
                                piece_requests: List[PieceRequest],
                                settings: Optional[PackingSettings] = None) -> PackingResult:
    """
    Run the multi-board guillotine optimization.

    Items are expanded and sorted once, then boards are filled one after
    another from the remaining items. The run stops when everything is placed,
    when a fresh board accepts nothing (an item larger than the board in both
    orientations), or when the board limit is reached. Items left over in the
    last two cases are returned in unplaced_items.

    Args:
        board_width, board_height: Stock board dimensions
        piece_requests: Pieces to cut
        settings: Kerf, pruning threshold and board limit

    Returns:
        PackingResult with boards, unplaced items and the stop reason

    Raises:
        InvalidDimensionsError: If the board or any piece has non-positive dimensions
    """
    settings = settings or PackingSettings()
    _check_dimensions(board_width, board_height, piece_requests)

    remaining = sort_items_by_area(expand_piece_requests(piece_requests))
    logger.info(f"Starting guillotine optimization: {len(remaining)} items on "
                f"{board_width}x{board_height} boards, kerf={settings.kerf}")

    boards: List[Board] = []
    stop_reason = STOP_COMPLETE

    while remaining:
        if len(boards) >= settings.max_boards:
            stop_reason = STOP_BOARD_LIMIT
            logger.warning(f"Board limit of {settings.max_boards} reached with "
                           f"{len(remaining)} items still unplaced")
            break

        placed, unplaced = pack_single_board(board_width, board_height, remaining, settings)

        if not placed:
            stop_reason = STOP_INFEASIBLE_ITEM
            first = remaining[0]
            logger.warning(f"Item {first.width}x{first.height} (piece #{first.request_index + 1}) "
                           f"does not fit an empty {board_width}x{board_height} board; "
                           f"{len(remaining)} items left unplaced")
            break

        board = Board(board_width, board_height, placed)
        boards.append(board)
        logger.debug(f"Board {len(boards)}: {len(placed)} pieces, "
                     f"{board.get_utilization_percentage():.1f}% utilization")
        remaining = unplaced

    result = PackingResult(board_width, board_height, boards, remaining, stop_reason, settings)
    logger.info(f"Optimization finished: {result}")
    return result


def pack_pieces(board_width: float, board_height: float, piece_requests: List[PieceRequest],
                settings: Optional[PackingSettings] = None) -> List[Board]:
    """
    Pack pieces onto boards and return only the boards.

    Use run_guillotine_optimization when unplaced items matter.
    """
    return run_guillotine_optimization(board_width, board_height, piece_requests, settings).boards
