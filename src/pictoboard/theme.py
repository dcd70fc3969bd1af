"""
테마 시스템
하드코딩된 색상 값들을 중앙에서 관리
"""


class Theme:
    """라이트 캔버스 테마 색상 정의"""

    # ============================================================
    # 기본 배경색
    # ============================================================
    BG_PRIMARY = "#f4f6f8"      # 캔버스 배경
    BG_SECONDARY = "#ffffff"    # 사이드바, 패널
    BG_NODE = "#ffffff"         # 노드 카드
    BG_TEXT_NODE = "#fffbe6"    # 텍스트 노드
    BG_PLACEHOLDER = "#eceff1"  # 이미지 없음

    # ============================================================
    # 텍스트 색상
    # ============================================================
    TEXT_PRIMARY = "#222222"
    TEXT_SECONDARY = "#666666"

    # ============================================================
    # 강조 색상
    # ============================================================
    ACCENT_PRIMARY = "#0d6efd"  # 선택 테두리
    ACCENT_DANGER = "#dc3545"   # 삭제 글리프
    ACCENT_WARNING = "#ffa500"  # 핀 해제 상태

    # ============================================================
    # 노드 / 연결선
    # ============================================================
    NODE_BORDER = "#c5ccd3"
    CONNECTION = "#5a6a7a"
    GRID_DOT = "#d5dbe1"
