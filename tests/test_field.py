# tests/test_field.py
import pytest
from gridclaim.field import GRID_SIZE, PALETTE, cell_key, normalize_color, parse_key

def test_key_round_trip():
    assert cell_key(3, 7) == "3 7"
    assert parse_key("3 7") == (3, 7)
    assert parse_key("  9   0 ") == (9, 0)

@pytest.mark.parametrize("row,col", [(-1, 0), (0, GRID_SIZE), (GRID_SIZE, 0)])
def test_key_out_of_bounds(row, col):
    with pytest.raises(ValueError):
        cell_key(row, col)

@pytest.mark.parametrize("key", ["", "3", "3 7 1", "a b", "10 0", "3,7"])
def test_parse_rejects_bad_keys(key):
    with pytest.raises(ValueError):
        parse_key(key)

def test_color_is_case_insensitive():
    assert normalize_color("red") == "Red"
    assert normalize_color(" BLUE ") == "Blue"
    assert all(normalize_color(c.upper()) == c for c in PALETTE)

def test_unknown_color():
    with pytest.raises(ValueError):
        normalize_color("Magenta")
