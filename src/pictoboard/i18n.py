"""
i18n 모듈
TOML 기반 다국어 지원. t("section.key") 로 번역 문자열 반환.
"""
import tomllib
from pathlib import Path

_LANG_DIR = Path(__file__).resolve().parent / "lang"
_FALLBACK_LANG = "NL"

_strings: dict = {}
_lang: str = _FALLBACK_LANG


def _flatten(data: dict, prefix: str = "") -> dict:
    """중첩 딕셔너리를 "section.key" 형태로 평탄화"""
    result = {}
    for k, v in data.items():
        full_key = f"{prefix}.{k}" if prefix else k
        if isinstance(v, dict):
            result.update(_flatten(v, full_key))
        else:
            result[full_key] = str(v)
    return result


def _read_lang(lang: str) -> dict:
    path = _LANG_DIR / f"{lang}.toml"
    if not path.exists():
        return {}
    with open(path, "rb") as f:
        return _flatten(tomllib.load(f))


def load(lang: str = None):
    """언어 파일 로드. 선택 언어에 없는 key 는 NL 문자열로 채운다."""
    global _strings, _lang

    if lang:
        _lang = lang.upper()

    strings = _read_lang(_FALLBACK_LANG)
    if _lang != _FALLBACK_LANG:
        strings.update(_read_lang(_lang))
    _strings = strings


def current_language() -> str:
    return _lang


def t(key: str, **kwargs) -> str:
    """
    번역 문자열 반환.
    t("menu.save") → "Opslaan"
    t("sidebar.more", count=3) → "...en nog 3 andere. Typ om te zoeken."
    """
    if not _strings:
        load()

    text = _strings.get(key, key)
    if kwargs:
        text = text.format(**kwargs)
    return text
