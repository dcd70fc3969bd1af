"""
앱 설정 저장/로드
JSON 기반, AppData/PictoBoard 폴더에 저장
메모리 캐싱으로 파일 I/O 최소화
"""
import json
import os
import threading
from pathlib import Path
from typing import Dict, Any

# 설정 캐시 (메모리)
_settings_cache: Dict[str, Any] | None = None
_cache_mtime: float | None = None
_settings_lock = threading.Lock()


# ============================================================
# 앱 데이터 경로
# ============================================================

def get_app_data_path() -> Path:
    """AppData/PictoBoard 경로 반환 (PICTOBOARD_DATA_DIR 우선)"""
    override = os.environ.get("PICTOBOARD_DATA_DIR")
    if override:
        app_dir = Path(override)
    elif os.name == 'nt':  # Windows
        app_dir = Path(os.environ.get('APPDATA', Path.home())) / 'PictoBoard'
    else:  # Linux/Mac
        app_dir = Path.home() / '.config' / 'PictoBoard'

    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


def _get_settings_path() -> Path:
    """설정 파일 경로"""
    return get_app_data_path() / 'settings.json'


def _load_all() -> dict:
    """전체 설정 로드 (캐시 사용, 스레드 안전)"""
    global _settings_cache, _cache_mtime

    with _settings_lock:
        path = _get_settings_path()
        if not path.exists():
            _settings_cache = {}
            _cache_mtime = None
            return {}

        try:
            current_mtime = path.stat().st_mtime
            if _settings_cache is not None and _cache_mtime == current_mtime:
                return _settings_cache.copy()

            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("settings root must be an object")

            _settings_cache = data.copy()
            _cache_mtime = current_mtime
            return data

        except (json.JSONDecodeError, ValueError, OSError) as e:
            from pictoboard.logger import get_logger
            get_logger("pictoboard.settings").warning(
                f"Failed to load settings from {path}: {e}"
            )
            return {}


def _save_all(data: dict):
    """전체 설정 저장 (원자적 쓰기 + 캐시 업데이트, 스레드 안전)"""
    global _settings_cache, _cache_mtime

    with _settings_lock:
        path = _get_settings_path()
        tmp_path = path.with_suffix('.json.tmp')
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(str(tmp_path), str(path))

        _settings_cache = data.copy()
        _cache_mtime = path.stat().st_mtime


# ============================================================
# 일반 설정
# ============================================================

def get_setting(key: str, default=None):
    """일반 설정값 가져오기"""
    return _load_all().get(key, default)


def set_setting(key: str, value):
    """일반 설정값 저장"""
    data = _load_all()
    data[key] = value
    _save_all(data)


# ============================================================
# 개발자 모드
# ============================================================

def is_developer_mode() -> bool:
    """개발자 모드 여부 (콘솔 로그 출력)"""
    return bool(get_setting("developer_mode", False))


def set_developer_mode(enabled: bool):
    set_setting("developer_mode", enabled)


# ============================================================
# 언어
# ============================================================

def get_language() -> str:
    """언어 코드 반환 (기본 NL)"""
    return get_setting("language", "NL")


def set_language(lang: str):
    set_setting("language", lang)


# ============================================================
# 픽토그램 카탈로그 / 장면 저장소
# ============================================================

def get_catalog_dir() -> Path:
    """픽토그램 폴더 (환경변수 → 설정 → AppData/picto_nl)"""
    env_dir = os.environ.get("PICTOBOARD_CATALOG_DIR")
    if env_dir:
        return Path(env_dir)
    configured = get_setting("catalog_dir")
    if configured:
        return Path(configured)
    return get_app_data_path() / "picto_nl"


def set_catalog_dir(path: str):
    set_setting("catalog_dir", str(path))


def get_scene_store_path() -> Path:
    """저장된 장면(JSON key-value) 파일 경로"""
    configured = get_setting("scene_store_path")
    if configured:
        return Path(configured)
    return get_app_data_path() / "scenes.json"
