"""Tests for the piece color palette."""

from colors import PALETTE, DARK_TEXT, LIGHT_TEXT, get_piece_color, get_text_color, hex_to_rgb


def test_palette_cycles():
    assert get_piece_color(0) == '#3b82f6'
    assert get_piece_color(len(PALETTE)) == get_piece_color(0)
    assert get_piece_color(21) == PALETTE[1]


def test_hex_to_rgb():
    assert hex_to_rgb('#3b82f6') == (59, 130, 246)
    assert hex_to_rgb('#ffffff') == (255, 255, 255)


def test_text_color_contrast():
    assert get_text_color('#ffffff') == DARK_TEXT
    assert get_text_color('#000000') == LIGHT_TEXT
    assert get_text_color('#eab308') == DARK_TEXT
    assert get_text_color('#3b82f6') == LIGHT_TEXT
