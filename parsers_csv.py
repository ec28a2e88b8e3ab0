"""
Input parsers for OptiCut guillotine cutting optimization tool.
Handles reading piece lists from CSV files or tables and validating user input.
"""

import pandas as pd
import logging
from typing import List, Tuple, Any
from data_models import PieceRequest, InvalidDimensionsError

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ['Width', 'Height', 'Quantity']

# Accepted alternative headers, matched case-insensitively
COLUMN_ALIASES = {
    'width': 'Width',
    'w': 'Width',
    'ancho': 'Width',
    'height': 'Height',
    'h': 'Height',
    'alto': 'Height',
    'quantity': 'Quantity',
    'qty': 'Quantity',
    'cantidad': 'Quantity',
    'label': 'Label',
    'name': 'Label',
    'nombre': 'Label'
}


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    mapping = {}
    for column in df.columns:
        canonical = COLUMN_ALIASES.get(str(column).strip().lower())
        if canonical and canonical not in mapping.values():
            mapping[column] = canonical
    return df.rename(columns=mapping)


def piece_requests_from_dataframe(df: pd.DataFrame) -> List[PieceRequest]:
    """
    Create PieceRequest objects from a table of pieces.

    Args:
        df: DataFrame with Width, Height, Quantity and optional Label columns

    Returns:
        List of PieceRequest objects with sequential request indices

    Raises:
        ValueError: If required columns are missing
    """
    df = _normalize_columns(df)

    missing_columns = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing_columns:
        logger.error(f"Missing required columns in piece list: {missing_columns}")
        logger.error(f"Available columns: {list(df.columns)}")
        raise ValueError(f"Missing required columns in piece list: {missing_columns}")

    requests = []
    for index, row in df.iterrows():
        label = ''
        if 'Label' in df.columns and not pd.isna(row['Label']):
            label = str(row['Label']).strip()

        # Blank rows come from the interactive editor
        if not label and all(_is_blank(row[col]) for col in REQUIRED_COLUMNS):
            continue

        width = _read_number(row['Width'])
        height = _read_number(row['Height'])
        quantity = _read_number(row['Quantity'])
        if quantity.is_integer():
            quantity = int(quantity)

        # Incomplete rows are kept so validate_cutting_inputs reports them
        if pd.isna(width) or pd.isna(height) or pd.isna(quantity):
            logger.warning(f"Row {index + 1} of the piece list is incomplete or unreadable")

        requests.append(PieceRequest(width, height, quantity, len(requests), label))

    logger.info(f"Loaded {len(requests)} piece types")
    return requests


def _is_blank(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip() == ''
    return pd.isna(value)


def _read_number(value: Any) -> float:
    """Numeric cell value, NaN when the cell is empty or not a number."""
    try:
        return float(value)
    except (ValueError, TypeError):
        return float('nan')


def load_piece_requests(source: Any) -> List[PieceRequest]:
    """
    Load a piece list from a CSV file.

    Args:
        source: Path or file-like object accepted by pandas.read_csv

    Returns:
        List of PieceRequest objects

    Expected CSV columns:
        - Width: Piece width in centimeters
        - Height: Piece height in centimeters
        - Quantity: Number of pieces needed
        - Label: Optional piece name
    """
    df = pd.read_csv(source)
    logger.info(f"Piece list CSV columns: {list(df.columns)}")
    return piece_requests_from_dataframe(df)


def piece_requests_to_dataframe(piece_requests: List[PieceRequest]) -> pd.DataFrame:
    """Table form of a piece list, as shown in the editor."""
    return pd.DataFrame(
        [{'Label': r.label, 'Width': r.width, 'Height': r.height, 'Quantity': r.quantity}
         for r in piece_requests],
        columns=['Label', 'Width', 'Height', 'Quantity']
    )


def _is_positive_number(value: Any) -> bool:
    try:
        number = float(value)
    except (ValueError, TypeError):
        return False
    return not pd.isna(number) and number > 0


def validate_cutting_inputs(board_width: Any, board_height: Any,
                            piece_requests: List[PieceRequest]) -> Tuple[bool, List[str]]:
    """
    Validate board size and piece list before optimization.

    Args:
        board_width, board_height: Board dimensions as entered
        piece_requests: Pieces to cut

    Returns:
        Tuple of (is_valid, error_messages)
    """
    errors = []

    board_valid = True
    if not _is_positive_number(board_width):
        errors.append("Board width must be a number greater than 0")
        board_valid = False
    if not _is_positive_number(board_height):
        errors.append("Board height must be a number greater than 0")
        board_valid = False

    if not piece_requests:
        errors.append("Add at least one piece to calculate")

    for request in piece_requests:
        number = request.request_index + 1
        piece_valid = True
        if not _is_positive_number(request.width) or not _is_positive_number(request.height):
            errors.append(f"Piece {number}: width and height must be greater than 0")
            piece_valid = False
        if not request.has_valid_quantity():
            errors.append(f"Piece {number}: quantity must be a whole number of at least 1")

        if board_valid and piece_valid:
            bw, bh = float(board_width), float(board_height)
            if not request.fits_board(bw, bh):
                errors.append(
                    f"Piece {number}: {request.width:g}×{request.height:g} cm does not fit "
                    f"the board ({bw:g}×{bh:g} cm), not even rotated"
                )

    if errors:
        logger.info(f"Input validation found {len(errors)} problems")
    return len(errors) == 0, errors


def require_valid_inputs(board_width: Any, board_height: Any, piece_requests: List[PieceRequest]):
    """
    Validate inputs and fail fast.

    Raises:
        InvalidDimensionsError: With all validation messages joined
    """
    is_valid, errors = validate_cutting_inputs(board_width, board_height, piece_requests)
    if not is_valid:
        raise InvalidDimensionsError("; ".join(errors))
