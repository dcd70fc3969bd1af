"""
픽토그램 카탈로그
- load_manifest: manifest.json (파일명 목록) 또는 폴더의 *.png
- filter_catalog / visible_slice: 사이드바 검색 + 표시 개수 제한
- file_to_data_uri / decode_data_uri: 업로드 이미지를 노드 content 로 보관
"""
from __future__ import annotations

import base64
import binascii
import json
import mimetypes
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from pictoboard.constants import CATALOG_DISPLAY_LIMIT
from pictoboard.logger import get_logger

logger = get_logger("pictoboard.catalog")

MANIFEST_NAME = "manifest.json"
_DATA_URI_PREFIX = "data:"


# ============================================================
# 매니페스트
# ============================================================

def load_manifest(catalog_dir: Path) -> List[str]:
    """카탈로그 파일명 목록. 읽을 수 없으면 빈 목록."""
    catalog_dir = Path(catalog_dir)
    manifest = catalog_dir / MANIFEST_NAME
    if manifest.exists():
        try:
            with open(manifest, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"[CATALOG] manifest unreadable {manifest}: {e}")
            return []
        if not isinstance(data, list):
            logger.warning(f"[CATALOG] manifest is not a list: {manifest}")
            return []
        return [str(name) for name in data if isinstance(name, str) and name]

    if not catalog_dir.is_dir():
        logger.info(f"[CATALOG] no catalog folder at {catalog_dir}")
        return []
    return sorted(p.name for p in catalog_dir.glob("*.png") if p.is_file())


def filter_catalog(names: Sequence[str], term: str) -> List[str]:
    """대소문자 무시 부분 문자열 검색. 빈 검색어는 전체."""
    term = (term or "").strip().lower()
    if not term:
        return list(names)
    return [name for name in names if term in name.lower()]


def visible_slice(names: Sequence[str], limit: int = CATALOG_DISPLAY_LIMIT) -> Tuple[List[str], int]:
    """(표시할 항목, 숨겨진 개수)"""
    shown = list(names[:limit])
    return shown, max(0, len(names) - limit)


# ============================================================
# data URI
# ============================================================

def is_data_uri(content: str) -> bool:
    return bool(content) and content.startswith(_DATA_URI_PREFIX)


def file_to_data_uri(path: Path) -> str:
    """이미지 파일 → data:<mime>;base64,... (OSError 는 호출자에게)"""
    path = Path(path)
    mime, _ = mimetypes.guess_type(path.name)
    if not mime or not mime.startswith("image/"):
        mime = "application/octet-stream"
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime};base64,{encoded}"


def decode_data_uri(content: str) -> Optional[bytes]:
    """base64 data URI 본문 디코드. 형식이 틀리면 None."""
    if not is_data_uri(content):
        return None
    header, sep, payload = content.partition(",")
    if not sep or not header.endswith(";base64"):
        return None
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        logger.warning("[CATALOG] invalid base64 in data URI")
        return None
