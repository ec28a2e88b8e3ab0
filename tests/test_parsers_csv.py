"""Tests for piece list loading and input validation."""

import io

import pandas as pd
import pytest

from data_models import PieceRequest, InvalidDimensionsError
from parsers_csv import (load_piece_requests, piece_requests_from_dataframe, piece_requests_to_dataframe,
                         validate_cutting_inputs, require_valid_inputs)


class TestLoadPieceRequests:

    def test_standard_columns(self):
        csv_text = "Label,Width,Height,Quantity\nSide,60,40,8\nShelf,90,30,4\n"

        requests = load_piece_requests(io.StringIO(csv_text))

        assert len(requests) == 2
        assert (requests[0].width, requests[0].height, requests[0].quantity) == (60.0, 40.0, 8)
        assert requests[0].label == "Side"
        assert [r.request_index for r in requests] == [0, 1]

    def test_column_aliases(self):
        csv_text = "Ancho,Alto,Cantidad,Nombre\n60,40,2,Puerta\n"

        requests = load_piece_requests(io.StringIO(csv_text))

        assert requests[0].label == "Puerta"
        assert requests[0].quantity == 2

    def test_label_is_optional(self):
        requests = load_piece_requests(io.StringIO("w,h,qty\n10,20,1\n"))

        assert requests[0].label == ""

    def test_missing_column_raises(self):
        with pytest.raises(ValueError, match="Missing required columns"):
            load_piece_requests(io.StringIO("Width,Height\n10,20\n"))

    def test_unreadable_rows_are_reported(self):
        csv_text = "Width,Height,Quantity\n60,40,2\nabc,10,1\n30,30,1\n"

        requests = load_piece_requests(io.StringIO(csv_text))
        is_valid, errors = validate_cutting_inputs(100, 100, requests)

        assert len(requests) == 3
        assert [r.request_index for r in requests] == [0, 1, 2]
        assert not is_valid
        assert errors == ["Piece 2: width and height must be greater than 0"]


class TestDataFrameConversion:

    def test_blank_editor_rows_are_skipped(self):
        df = pd.DataFrame([
            {'Label': 'A', 'Width': 10.0, 'Height': 20.0, 'Quantity': 1},
            {'Label': None, 'Width': None, 'Height': None, 'Quantity': None},
            {'Label': '', 'Width': float('nan'), 'Height': float('nan'), 'Quantity': float('nan')},
        ])

        requests = piece_requests_from_dataframe(df)

        assert len(requests) == 1

    def test_row_without_quantity_is_reported(self):
        df = pd.DataFrame([
            {'Label': 'A', 'Width': 10.0, 'Height': 20.0, 'Quantity': 1},
            {'Label': 'B', 'Width': 30.0, 'Height': 20.0, 'Quantity': None},
        ])

        requests = piece_requests_from_dataframe(df)
        is_valid, errors = validate_cutting_inputs(100, 100, requests)

        assert len(requests) == 2
        assert requests[1].label == "B"
        assert not is_valid
        assert errors == ["Piece 2: quantity must be a whole number of at least 1"]

    def test_row_without_dimensions_is_reported(self):
        df = pd.DataFrame([{'Label': '', 'Width': float('nan'), 'Height': float('nan'), 'Quantity': 1}])

        is_valid, errors = validate_cutting_inputs(100, 100, piece_requests_from_dataframe(df))

        assert not is_valid
        assert errors == ["Piece 1: width and height must be greater than 0"]

    def test_whole_float_quantity_becomes_int(self):
        df = pd.DataFrame([{'Width': 10.0, 'Height': 20.0, 'Quantity': 3.0}])

        requests = piece_requests_from_dataframe(df)

        assert requests[0].quantity == 3
        assert isinstance(requests[0].quantity, int)

    def test_fractional_quantity_is_reported(self):
        df = pd.DataFrame([{'Width': 10.0, 'Height': 20.0, 'Quantity': 2.5}])

        is_valid, errors = validate_cutting_inputs(100, 100, piece_requests_from_dataframe(df))

        assert not is_valid
        assert errors == ["Piece 1: quantity must be a whole number of at least 1"]

    def test_round_trip_through_table(self):
        requests = [PieceRequest(10.0, 20.0, 3, 0, "A"), PieceRequest(5.0, 5.0, 1, 1, "")]

        loaded = piece_requests_from_dataframe(piece_requests_to_dataframe(requests))

        assert [r.to_dict() for r in loaded] == [r.to_dict() for r in requests]


class TestValidation:

    def test_valid_input(self):
        is_valid, errors = validate_cutting_inputs(244, 122, [PieceRequest(60, 40, 8, 0)])

        assert is_valid
        assert errors == []

    @pytest.mark.parametrize("board_width", [0, -10, "abc", None])
    def test_invalid_board_width(self, board_width):
        is_valid, errors = validate_cutting_inputs(board_width, 122, [PieceRequest(60, 40, 1, 0)])

        assert not is_valid
        assert "Board width must be a number greater than 0" in errors

    def test_empty_piece_list(self):
        is_valid, errors = validate_cutting_inputs(100, 100, [])

        assert not is_valid
        assert errors == ["Add at least one piece to calculate"]

    def test_invalid_piece(self):
        is_valid, errors = validate_cutting_inputs(100, 100, [PieceRequest(0, 10, 0, 0)])

        assert not is_valid
        assert "Piece 1: width and height must be greater than 0" in errors
        assert "Piece 1: quantity must be a whole number of at least 1" in errors

    def test_piece_larger_than_board(self):
        is_valid, errors = validate_cutting_inputs(100, 100, [PieceRequest(10, 10, 1, 0),
                                                              PieceRequest(200, 10, 1, 1)])

        assert not is_valid
        assert len(errors) == 1
        assert errors[0].startswith("Piece 2: 200×10 cm does not fit the board (100×100 cm)")

    def test_rotated_fit_is_accepted(self):
        is_valid, _ = validate_cutting_inputs(100, 50, [PieceRequest(40, 90, 1, 0)])

        assert is_valid

    def test_require_valid_inputs_raises(self):
        with pytest.raises(InvalidDimensionsError, match="Board height"):
            require_valid_inputs(100, 0, [PieceRequest(10, 10, 1, 0)])

    def test_require_valid_inputs_passes(self):
        require_valid_inputs(100, 100, [PieceRequest(10, 10, 1, 0)])
