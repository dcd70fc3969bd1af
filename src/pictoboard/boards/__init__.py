"""보드 플러그인"""
from pictoboard.boards.base import BoardPlugin

__all__ = ["BoardPlugin"]
