"""
엔진 상수
캔버스, 제스처, 인쇄, 저장소에서 공유하는 고정값
"""

# ============================================================
# 그리드 / 노드 크기
# ============================================================
GRID_SIZE = 20                # 노드 x/y 스냅 간격
DOT_SIZE = 1.2                # 배경 도트 반지름
DEFAULT_NODE_SIZE = 100       # 새 노드 기본 너비/높이
MIN_NODE_SIZE = 50            # 리사이즈 하한

# ============================================================
# 연결선
# ============================================================
CURVE_ANCHOR_OFFSET = 50      # 노드 중심 = (x+50, y+50), 실제 크기와 무관
CURVE_CONTROL_RATIO = 0.5     # 제어점 오프셋 = 거리 * 0.5
CURVE_CONTROL_MAX = 150       # 제어점 오프셋 상한

# ============================================================
# 제스처
# ============================================================
CLICK_THRESHOLD_SQ = 25       # 변위 제곱 <= 25 이면 클릭

# ============================================================
# 인쇄 (A4 가로, 96 DPI)
# ============================================================
PRINT_PAGE_WIDTH = 1122
PRINT_PAGE_HEIGHT = 793
PRINT_MARGIN = 40
PRINT_DELAY_MS = 1000         # 미리보기가 그려질 시간

# ============================================================
# 저장소
# ============================================================
SCENE_KEY_PREFIX = "picto_chain_"
TEXT_DROP_PAYLOAD = "::TEXT::"

# ============================================================
# 사이드바
# ============================================================
CATALOG_DISPLAY_LIMIT = 60
CATALOG_THUMB_SIZE = 64

# ============================================================
# 뷰 줌
# ============================================================
ZOOM_FACTOR = 1.15
ZOOM_MIN = 0.25
ZOOM_MAX = 4.0

# ============================================================
# 글리프 (삭제/핀/리사이즈 핸들)
# ============================================================
GLYPH_SIZE = 22
HANDLE_SIZE = 12
