"""PictoBoard - 픽토그램 연결 보드"""

__version__ = "1.0.0"
