"""애플리케이션 전역 예외 및 스레드 예외를 로깅하는 진입점 모듈."""

import faulthandler
import sys
import threading
import traceback
from datetime import datetime

from pictoboard.settings import get_app_data_path

# 로그 디렉터리를 앱 데이터 폴더 하위에 생성
log_dir = get_app_data_path() / "logs"
log_dir.mkdir(parents=True, exist_ok=True)
# 크래시 로그 파일 핸들러를 열어 faulthandler에 연결
_fault_log = open(log_dir / "crash.log", "a", encoding="utf-8")
faulthandler.enable(file=_fault_log)


def _timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]  # 밀리초까지


def _log_exception(exc_type, exc_value, exc_tb):
    """처리되지 않은 예외를 포맷팅해 파일과 로거에 기록한다."""
    tb_lines = traceback.format_exception(exc_type, exc_value, exc_tb)
    _fault_log.write(f"\n[{_timestamp()}] UNHANDLED EXCEPTION\n{''.join(tb_lines)}")
    _fault_log.flush()

    from pictoboard.logger import get_logger
    get_logger("pictoboard.crash").critical(
        f"Unhandled exception: {exc_type.__name__}: {exc_value}"
    )


def _thread_exception(args):
    """스레드 예외 훅에서 호출되어 스레드별 예외를 기록한다."""
    tb_lines = traceback.format_exception(args.exc_type, args.exc_value, args.exc_traceback)
    thread_name = args.thread.name if args.thread else "unknown"
    _fault_log.write(f"\n[{_timestamp()}] THREAD EXCEPTION (thread={thread_name})\n{''.join(tb_lines)}")
    _fault_log.flush()


def _unraisable_exception(hook_args):
    """파이썬의 unraisable 예외를 기록한다(예: __del__ 내부 오류)."""
    tb_lines = traceback.format_exception(
        type(hook_args.exc_value), hook_args.exc_value, hook_args.exc_traceback
    )
    obj_repr = repr(hook_args.object) if hook_args.object is not None else "None"
    _fault_log.write(f"\n[{_timestamp()}] UNRAISABLE EXCEPTION (object={obj_repr})\n{''.join(tb_lines)}")
    _fault_log.flush()


# 전역 예외 훅 등록
sys.excepthook = _log_exception
threading.excepthook = _thread_exception
sys.unraisablehook = _unraisable_exception

from pictoboard import ui  # noqa: E402
from pictoboard import app  # noqa: E402


def main():
    ui.run_app(app.App())


if __name__ == "__main__":
    main()
