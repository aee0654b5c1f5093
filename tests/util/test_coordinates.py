from warrens.util.coordinates import Rect, is_valid_world_tile_pos


def test_rect_corners_and_size() -> None:
    rect = Rect(2, 3, 5, 4)
    assert (rect.x1, rect.y1, rect.x2, rect.y2) == (2, 3, 7, 7)
    assert rect.width == 5
    assert rect.height == 4


def test_rect_center_rounds_down() -> None:
    assert Rect(0, 0, 5, 5).center() == (2, 2)
    assert Rect(10, 10, 3, 4).center() == (11, 12)


def test_rect_from_bounds_round_trip() -> None:
    rect = Rect.from_bounds(1, 2, 6, 9)
    assert rect == Rect(1, 2, 5, 7)
    assert rect.copy() == rect
    assert rect.copy() is not rect


def test_rect_intersects_includes_touching_edges() -> None:
    """Rooms that share an edge count as intersecting, so rooms keep a gap."""
    a = Rect(0, 0, 5, 5)
    assert a.intersects(Rect(5, 0, 3, 3))
    assert a.intersects(Rect(2, 2, 1, 1))
    assert not a.intersects(Rect(6, 6, 2, 2))


def test_is_valid_world_tile_pos() -> None:
    assert is_valid_world_tile_pos((0, 0), 10, 5)
    assert is_valid_world_tile_pos((9, 4), 10, 5)
    assert not is_valid_world_tile_pos((10, 4), 10, 5)
    assert not is_valid_world_tile_pos((-1, 0), 10, 5)
