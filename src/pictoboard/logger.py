"""
로깅 설정
- 파일 로깅 (AppData/PictoBoard/logs/pictoboard.log, 로테이션)
- 개발자 모드에서는 콘솔 출력 추가
"""
import logging
import sys
from logging.handlers import RotatingFileHandler

_logger_initialized = False


def setup_logger():
    """로거 초기화 (앱 시작 시 1회 호출)"""
    global _logger_initialized
    if _logger_initialized:
        return

    from pictoboard.settings import get_app_data_path
    log_dir = get_app_data_path() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("pictoboard")
    logger.setLevel(logging.DEBUG)

    if logger.handlers:
        _logger_initialized = True
        return

    # 1. 파일 핸들러 (로테이션)
    try:
        file_handler = RotatingFileHandler(
            log_dir / "pictoboard.log",
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)
    except OSError as e:
        print(f"[pictoboard] file logging disabled: {e}", file=sys.stderr)

    # 2. 콘솔 핸들러 (개발자 모드)
    from pictoboard.settings import is_developer_mode
    if is_developer_mode():
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(logging.Formatter(
            '%(levelname)s - %(name)s - %(message)s'
        ))
        logger.addHandler(console_handler)

    _logger_initialized = True


def get_logger(name: str = "pictoboard"):
    """로거 인스턴스 반환"""
    return logging.getLogger(name)
