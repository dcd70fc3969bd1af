"""
캔버스 좌표 계산 (상태 없음)
- snap_to_grid: 그리드 스냅
- connection_curve / curve_midpoint: 연결선 베지어 곡선과 삭제 버튼 위치
- content_bounds / print_fit_transform: 인쇄용 맞춤 변환
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from pictoboard.constants import (
    GRID_SIZE, MIN_NODE_SIZE,
    CURVE_ANCHOR_OFFSET, CURVE_CONTROL_RATIO, CURVE_CONTROL_MAX,
    PRINT_PAGE_WIDTH, PRINT_PAGE_HEIGHT, PRINT_MARGIN,
)

# t=0.5 에서의 3차 베지어 가중치
_MIDPOINT_WEIGHTS = (0.125, 0.375, 0.375, 0.125)


def snap_to_grid(value: float, grid: int = GRID_SIZE):
    """가장 가까운 그리드 배수로 반올림 (.5 는 +방향)."""
    return math.floor(value / grid + 0.5) * grid


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Curve:
    """연결선: p1 → p2 3차 베지어, 제어점 c1/c2."""

    start: Point
    control1: Point
    control2: Point
    end: Point

    def points(self) -> Tuple[Point, Point, Point, Point]:
        return self.start, self.control1, self.control2, self.end


def node_anchor(node) -> Point:
    """노드 중심. 실제 크기와 무관하게 100x100 기준 (x+50, y+50)."""
    return Point(node.x + CURVE_ANCHOR_OFFSET, node.y + CURVE_ANCHOR_OFFSET)


def connection_curve(from_node, to_node) -> Curve:
    p1 = node_anchor(from_node)
    p2 = node_anchor(to_node)
    dist = math.hypot(p2.x - p1.x, p2.y - p1.y)
    k = min(dist * CURVE_CONTROL_RATIO, CURVE_CONTROL_MAX)
    return Curve(
        start=p1,
        control1=Point(p1.x + k, p1.y),
        control2=Point(p2.x - k, p2.y),
        end=p2,
    )


def curve_midpoint(curve: Curve) -> Point:
    """t=0.5 위치 (연결 삭제 버튼 자리).

    제어점 y 가 끝점 y 와 같으므로 y 성분은 0.5*(y1+y2) 와 동일하다.
    곡선 모양을 바꾸면 이 동일성은 깨진다.
    """
    pts = curve.points()
    x = sum(w * p.x for w, p in zip(_MIDPOINT_WEIGHTS, pts))
    y = sum(w * p.y for w, p in zip(_MIDPOINT_WEIGHTS, pts))
    return Point(x, y)


# ── 제스처 보조 ──────────────────────────────────────────

def drag_position(start_x: float, start_y: float, dx: float, dy: float) -> Tuple[float, float]:
    return snap_to_grid(start_x + dx), snap_to_grid(start_y + dy)


def resize_box(start_w: float, start_h: float, dx: float, dy: float) -> Tuple[float, float]:
    """크기는 스냅하지 않고 축별로 최소 50 유지."""
    return max(MIN_NODE_SIZE, start_w + dx), max(MIN_NODE_SIZE, start_h + dy)


# ── 인쇄 맞춤 ────────────────────────────────────────────

@dataclass(frozen=True)
class Bounds:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


def content_bounds(nodes: Iterable) -> Optional[Bounds]:
    """모든 노드의 실제 너비/높이를 포함하는 바운딩 박스. 노드가 없으면 None."""
    min_x = min_y = math.inf
    max_x = max_y = -math.inf
    for n in nodes:
        min_x = min(min_x, n.x)
        min_y = min(min_y, n.y)
        max_x = max(max_x, n.x + n.width)
        max_y = max(max_y, n.y + n.height)
    if min_x == math.inf:
        return None
    return Bounds(min_x, min_y, max_x, max_y)


@dataclass(frozen=True)
class PrintTransform:
    """translate(-origin) → scale → translate(offset) 순서로 적용되는 변환."""

    scale: float
    offset_x: float
    offset_y: float
    origin_x: float
    origin_y: float

    def map(self, x: float, y: float) -> Tuple[float, float]:
        return (
            (x - self.origin_x) * self.scale + self.offset_x,
            (y - self.origin_y) * self.scale + self.offset_y,
        )


def print_fit_transform(
    bounds: Optional[Bounds],
    page_width: float = PRINT_PAGE_WIDTH,
    page_height: float = PRINT_PAGE_HEIGHT,
    margin: float = PRINT_MARGIN,
) -> Optional[PrintTransform]:
    """콘텐츠를 여백 안쪽 영역에 맞추고 가운데 정렬. 확대도 허용 (상한 없음).

    바운딩 박스가 없거나 폭/높이가 0 이면 None (변환 없이 인쇄).
    """
    if bounds is None or bounds.width <= 0 or bounds.height <= 0:
        return None

    safe_w = page_width - margin * 2
    safe_h = page_height - margin * 2
    scale = min(safe_w / bounds.width, safe_h / bounds.height)

    offset_x = margin + (safe_w - bounds.width * scale) / 2
    offset_y = margin + (safe_h - bounds.height * scale) / 2
    return PrintTransform(
        scale=scale,
        offset_x=offset_x,
        offset_y=offset_y,
        origin_x=bounds.min_x,
        origin_y=bounds.min_y,
    )
