from __future__ import annotations
import logging

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """ルートロガーを初期化する（CLI 起動時に一度だけ呼ぶ）"""
    log_level = getattr(logging, str(level).upper(), logging.INFO)
    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    # SQL ログは IQVOTE_SQL_ECHO 側で制御する
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
