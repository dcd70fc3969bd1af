import pytest

from pictoboard.boards.canvas.geometry import (
    Bounds, connection_curve, content_bounds, curve_midpoint, drag_position,
    print_fit_transform, resize_box, snap_to_grid,
)
from pictoboard.boards.canvas.model import Node


@pytest.mark.parametrize("value,expected", [
    (0, 0), (9, 0), (10, 20), (11, 20), (105, 100), (112, 120),
    (-9, 0), (-10, 0), (-11, -20), (30, 40), (50, 60),
])
def test_snap_to_grid_rounds_half_up(value, expected):
    assert snap_to_grid(value) == expected


def test_drag_position_is_always_on_grid():
    for dx in range(-57, 58, 7):
        for dy in range(-43, 44, 9):
            x, y = drag_position(100, 120, dx + 0.3, dy - 0.6)
            assert x % 20 == 0 and y % 20 == 0


def test_resize_box_clamps_each_axis():
    assert resize_box(100, 100, 30, -10) == (130, 90)
    assert resize_box(100, 100, -1000, 5) == (50, 105)
    assert resize_box(100, 100, -75, -1e9) == (50, 50)
    # 크기는 스냅하지 않는다
    assert resize_box(100, 100, 7, 3) == (107, 103)


def test_connection_curve_anchors_and_controls():
    a = Node("a", 0, 0)
    b = Node("b", 400, 0, width=300, height=50)
    curve = connection_curve(a, b)

    assert (curve.start.x, curve.start.y) == (50, 50)
    # 실제 크기와 무관하게 (x+50, y+50)
    assert (curve.end.x, curve.end.y) == (450, 50)
    # 거리 400 → k = min(200, 150) = 150
    assert (curve.control1.x, curve.control1.y) == (200, 50)
    assert (curve.control2.x, curve.control2.y) == (300, 50)


def test_connection_curve_short_distance_uses_half():
    curve = connection_curve(Node("a", 0, 0), Node("b", 60, 80))
    # 거리 100 → k = 50
    assert curve.control1.x == 50 + 50
    assert curve.control2.x == 110 - 50


def test_curve_midpoint_matches_bezier_at_half():
    curve = connection_curve(Node("a", 20, 40), Node("b", 380, 260))
    mid = curve_midpoint(curve)

    p1, c1, c2, p2 = curve.points()
    assert mid.x == pytest.approx(0.125 * p1.x + 0.375 * c1.x + 0.375 * c2.x + 0.125 * p2.x)
    # 제어점 y 가 끝점 y 와 같아 단순식과 일치
    assert mid.y == pytest.approx(0.5 * (p1.y + p2.y))


def test_content_bounds_uses_real_size():
    nodes = [Node("a", 0, 0), Node("b", 200, 100, width=150, height=60)]
    assert content_bounds(nodes) == Bounds(0, 0, 350, 160)
    assert content_bounds([]) is None


def test_print_fit_single_node_fills_safe_area_centered():
    fit = print_fit_transform(content_bounds([Node("a", 0, 0)]))

    safe_w, safe_h = 1122 - 80, 793 - 80
    assert fit.scale == pytest.approx(min(safe_w / 100, safe_h / 100))

    left, top = fit.map(0, 0)
    right, bottom = fit.map(100, 100)
    assert left >= 40 and top >= 40
    assert right <= 1122 - 40 + 1e-9 and bottom <= 793 - 40 + 1e-9
    # 가운데 정렬
    assert (left + right) / 2 == pytest.approx(1122 / 2)
    assert (top + bottom) / 2 == pytest.approx(793 / 2)


def test_print_fit_translates_origin_first():
    bounds = Bounds(-300, 200, 700, 400)
    fit = print_fit_transform(bounds)

    x0, y0 = fit.map(bounds.min_x, bounds.min_y)
    assert (x0, y0) == pytest.approx((fit.offset_x, fit.offset_y))
    # 폭이 제한 축
    assert fit.scale == pytest.approx((1122 - 80) / 1000)
    assert fit.offset_x == pytest.approx(40)


def test_print_fit_degenerate_bounds():
    assert print_fit_transform(None) is None
    assert print_fit_transform(Bounds(10, 10, 10, 50)) is None
    assert print_fit_transform(Bounds(0, 0, 0, 0)) is None
