"""
Core data models for OptiCut guillotine cutting optimization tool.
Defines PieceRequest, Item, FreeRect, PlacedPiece, Board, PackingSettings and PackingResult classes.
"""

from typing import Optional, List, Dict, Any
import logging
import numbers

logger = logging.getLogger(__name__)

# Saw blade loss per cut: 0.4 mm expressed in centimeters
DEFAULT_KERF = 0.04
# Rectangles at or below this size in either dimension are unusable
MIN_RECT_SIZE = 0.01
# Upper bound on boards produced by a single optimization run
MAX_BOARDS = 500

STOP_COMPLETE = "complete"
STOP_INFEASIBLE_ITEM = "infeasible_item"
STOP_BOARD_LIMIT = "board_limit"


class InvalidDimensionsError(ValueError):
    """Raised when board or piece dimensions cannot produce a valid cutting plan."""


class PackingSettings:
    """
    Policy constants used by the packing engine.
    """

    def __init__(self, kerf: float = DEFAULT_KERF, min_rect_size: float = MIN_RECT_SIZE,
                 max_boards: int = MAX_BOARDS):
        """
        Initialize PackingSettings.

        Args:
            kerf: Material removed by each saw cut, in board units
            min_rect_size: Free rectangles with a side at or below this are discarded
            max_boards: Safety cap on the number of boards one run may produce

        Raises:
            ValueError: If any setting is out of range
        """
        if kerf < 0:
            raise ValueError(f"Kerf cannot be negative: {kerf}")
        if min_rect_size < 0:
            raise ValueError(f"Minimum rectangle size cannot be negative: {min_rect_size}")
        if int(max_boards) < 1:
            raise ValueError(f"Board limit must be at least 1: {max_boards}")

        self.kerf = float(kerf)
        self.min_rect_size = float(min_rect_size)
        self.max_boards = int(max_boards)

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'PackingSettings':
        """
        Build settings from a mapping, ignoring keys that are not settings.

        Args:
            values: Mapping such as a parsed config file or UI state

        Returns:
            PackingSettings with defaults for missing keys
        """
        known = {key: values[key] for key in ('kerf', 'min_rect_size', 'max_boards') if key in values}
        return cls(**known)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kerf': self.kerf,
            'min_rect_size': self.min_rect_size,
            'max_boards': self.max_boards
        }

    def __str__(self) -> str:
        return f"PackingSettings(kerf={self.kerf}, min_rect_size={self.min_rect_size}, max_boards={self.max_boards})"

    def __repr__(self) -> str:
        return self.__str__()


class PieceRequest:
    """
    Represents one distinct piece type requested by the user.
    """

    def __init__(self, width: float, height: float, quantity: int, request_index: int, label: str = ""):
        """
        Initialize a PieceRequest object.

        Args:
            width: Piece width in board units
            height: Piece height in board units
            quantity: Number of identical pieces needed
            request_index: Stable identity used for colors and legends
            label: Optional free-text name shown in reports
        """
        self.width = width
        self.height = height
        self.quantity = quantity
        self.request_index = request_index
        self.label = label

    def get_area(self) -> float:
        return self.width * self.height

    def get_total_area(self) -> float:
        """Area of all requested units of this piece."""
        return self.width * self.height * self.quantity

    def fits_board(self, board_width: float, board_height: float) -> bool:
        """
        Check if the piece fits an empty board in at least one orientation.

        Args:
            board_width, board_height: Board dimensions

        Returns:
            True if the piece fits normally or rotated 90 degrees
        """
        fits_normal = self.width <= board_width and self.height <= board_height
        fits_rotated = self.height <= board_width and self.width <= board_height
        return fits_normal or fits_rotated

    def has_valid_quantity(self) -> bool:
        """True if quantity is a whole number of at least 1."""
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, numbers.Integral):
            return False
        return self.quantity >= 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            'request_index': self.request_index,
            'label': self.label,
            'width': self.width,
            'height': self.height,
            'quantity': self.quantity
        }

    def __str__(self) -> str:
        return f"PieceRequest(#{self.request_index}, {self.width}x{self.height} x{self.quantity})"

    def __repr__(self) -> str:
        return self.__str__()


class Item:
    """
    A single unit of a PieceRequest, tracked individually during packing.
    """

    def __init__(self, width: float, height: float, request_index: int):
        self.width = width
        self.height = height
        self.request_index = request_index

    def get_area(self) -> float:
        return self.width * self.height

    def __eq__(self, other) -> bool:
        if not isinstance(other, Item):
            return NotImplemented
        return (self.width, self.height, self.request_index) == (other.width, other.height, other.request_index)

    def __str__(self) -> str:
        return f"Item(#{self.request_index}, {self.width}x{self.height})"

    def __repr__(self) -> str:
        return self.__str__()


class FreeRect:
    """
    Axis-aligned region of a board that is not yet assigned to any piece.
    """

    def __init__(self, x: float, y: float, width: float, height: float):
        """
        Initialize a FreeRect object.

        Args:
            x, y: Top-left corner on the board
            width, height: Dimensions of the free region
        """
        self.x = x
        self.y = y
        self.width = width
        self.height = height

    def get_area(self) -> float:
        return self.width * self.height

    def is_usable(self, min_rect_size: float = MIN_RECT_SIZE) -> bool:
        """
        Check if the rectangle is large enough to keep in the free pool.

        Args:
            min_rect_size: Threshold at or below which a side is considered degenerate

        Returns:
            True if both sides exceed the threshold
        """
        return self.width > min_rect_size and self.height > min_rect_size

    def fits(self, width: float, height: float) -> bool:
        """Check if a width x height footprint fits without rotation."""
        return width <= self.width and height <= self.height

    def __eq__(self, other) -> bool:
        if not isinstance(other, FreeRect):
            return NotImplemented
        return (self.x, self.y, self.width, self.height) == (other.x, other.y, other.width, other.height)

    def __str__(self) -> str:
        return f"FreeRect(({self.x}, {self.y}), {self.width}x{self.height})"

    def __repr__(self) -> str:
        return self.__str__()


class PlacedPiece:
    """
    A piece placed on a board. Width and height are the as-placed footprint,
    original dimensions are kept for labels.
    """

    def __init__(self, x: float, y: float, width: float, height: float, request_index: int,
                 original_width: float, original_height: float, rotated: bool):
        """
        Initialize a PlacedPiece object.

        Args:
            x, y: Position of the top-left corner on the board
            width, height: Footprint after optional rotation
            request_index: Index of the PieceRequest this piece came from
            original_width, original_height: Requested, un-rotated dimensions
            rotated: True if the piece was turned 90 degrees
        """
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.request_index = request_index
        self.original_width = original_width
        self.original_height = original_height
        self.rotated = rotated

    def get_area(self) -> float:
        return self.width * self.height

    def get_label(self) -> str:
        """Dimensions label as requested, e.g. '60×40'."""
        return f"{self.original_width:g}×{self.original_height:g}"

    def overlaps(self, other: 'PlacedPiece') -> bool:
        """
        Check if two footprints share any interior area.

        Args:
            other: Another placed piece on the same board

        Returns:
            True if the footprints overlap
        """
        return not (self.x + self.width <= other.x or
                    other.x + other.width <= self.x or
                    self.y + self.height <= other.y or
                    other.y + other.height <= self.y)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height,
            'request_index': self.request_index,
            'original_width': self.original_width,
            'original_height': self.original_height,
            'rotated': self.rotated
        }

    def __str__(self) -> str:
        rotated = ", rotated" if self.rotated else ""
        return f"PlacedPiece(#{self.request_index}, {self.width}x{self.height} at ({self.x}, {self.y}){rotated})"

    def __repr__(self) -> str:
        return self.__str__()


class Board:
    """
    Represents one stock board and the pieces cut from it.
    """

    def __init__(self, width: float, height: float, pieces: Optional[List[PlacedPiece]] = None):
        """
        Initialize a Board object.

        Args:
            width, height: Full board dimensions
            pieces: Pieces placed on this board, in placement order
        """
        self.width = width
        self.height = height
        self.pieces: List[PlacedPiece] = list(pieces) if pieces else []

    def get_total_area(self) -> float:
        return self.width * self.height

    def get_used_area(self) -> float:
        """
        Calculate the area covered by placed pieces.

        Returns:
            Sum of piece footprint areas
        """
        return sum(piece.get_area() for piece in self.pieces)

    def get_waste_area(self) -> float:
        return self.get_total_area() - self.get_used_area()

    def get_utilization_percentage(self) -> float:
        """
        Calculate the percentage of board area utilized.

        Returns:
            Utilization percentage (0-100)
        """
        total_area = self.get_total_area()
        if total_area == 0:
            return 0.0
        return (self.get_used_area() / total_area) * 100

    def get_waste_percentage(self) -> float:
        if self.get_total_area() == 0:
            return 0.0
        return 100.0 - self.get_utilization_percentage()

    def count_by_request(self) -> Dict[int, int]:
        """
        Count pieces per request index, in order of first appearance.

        Returns:
            Mapping of request index to number of pieces on this board
        """
        counts: Dict[int, int] = {}
        for piece in self.pieces:
            counts[piece.request_index] = counts.get(piece.request_index, 0) + 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        return {
            'width': self.width,
            'height': self.height,
            'pieces': [piece.to_dict() for piece in self.pieces]
        }

    def __str__(self) -> str:
        return f"Board({self.width}x{self.height}, {len(self.pieces)} pieces)"

    def __repr__(self) -> str:
        return self.__str__()


class PackingResult:
    """
    Outcome of a full optimization run: boards produced plus anything left over.
    """

    def __init__(self, board_width: float, board_height: float, boards: List[Board],
                 unplaced_items: List[Item], stop_reason: str, settings: PackingSettings):
        """
        Initialize a PackingResult object.

        Args:
            board_width, board_height: Stock board dimensions used for the run
            boards: Boards in the order they were filled
            unplaced_items: Items that were never placed on any board
            stop_reason: One of STOP_COMPLETE, STOP_INFEASIBLE_ITEM, STOP_BOARD_LIMIT
            settings: Settings the run used
        """
        self.board_width = board_width
        self.board_height = board_height
        self.boards = boards
        self.unplaced_items = unplaced_items
        self.stop_reason = stop_reason
        self.settings = settings

    @property
    def is_complete(self) -> bool:
        return self.stop_reason == STOP_COMPLETE and not self.unplaced_items

    def get_placed_count(self) -> int:
        return sum(len(board.pieces) for board in self.boards)

    def get_total_board_area(self) -> float:
        return sum(board.get_total_area() for board in self.boards)

    def get_total_used_area(self) -> float:
        return sum(board.get_used_area() for board in self.boards)

    def get_utilization_percentage(self) -> float:
        """
        Aggregate utilization over all boards.

        Returns:
            Used area / total board area as a percentage, 0 with no boards
        """
        total_area = self.get_total_board_area()
        if total_area == 0:
            return 0.0
        return (self.get_total_used_area() / total_area) * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            'board_width': self.board_width,
            'board_height': self.board_height,
            'boards': [board.to_dict() for board in self.boards],
            'unplaced_items': [
                {'width': item.width, 'height': item.height, 'request_index': item.request_index}
                for item in self.unplaced_items
            ],
            'stop_reason': self.stop_reason,
            'settings': self.settings.to_dict()
        }

    def __str__(self) -> str:
        return (f"PackingResult({len(self.boards)} boards, {self.get_placed_count()} placed, "
                f"{len(self.unplaced_items)} unplaced, {self.stop_reason})")

    def __repr__(self) -> str:
        return self.__str__()
