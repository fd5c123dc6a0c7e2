# medal_compass/utils/logger.py
from __future__ import annotations
import sys, os, logging
from pathlib import Path
from loguru import logger


# stdlibのloggingを使うライブラリ．ここに挙げたものはloguruに集約する．
BRIDGED_LOGGERS = (
    "uvicorn",
    "uvicorn.error",
    "uvicorn.access",
    "fastapi",
    "sqlalchemy",
    "alembic",
)


class InterceptHandler(logging.Handler):
    """
    stdlibのLogRecordをloguruに転送するハンドラ．
    """
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(log_lvl: str = "INFO", to_file: bool = False,
                  file_path: str = "logs/medal_compass.log",
                  rotation: str = "5 MB", keep_total: int = 5) -> None:
    """
    - 色付きのコンソール出力．
    - オプションでローテーション付きのファイル出力．
    - uvicorn/sqlalchemy/alembicのstdlib loggingをloguruに橋渡しする．
    """
    log_fmt = (
        "<n><d><level>{time:YYYY-MM-DD HH:mm:ss.SSS} | "
        "{name:>28.28}:{line:<4} | "
        "{level:1.1} | </level></d></n><level>{message}</level>"
    )

    # setup_loggingが2回呼ばれても出力が重複しないよう，既定のシンクを外す．
    logger.remove()

    logger.add(
        sys.stdout,
        level=log_lvl,
        format=log_fmt,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    if to_file:
        Path(os.path.dirname(file_path) or ".").mkdir(parents=True, exist_ok=True)
        logger.add(
            file_path,
            level=log_lvl,
            format=log_fmt,
            colorize=False,
            rotation=rotation,
            retention=max(0, keep_total - 1), # 現在のファイル + ローテーション済み(N-1)個
            compression="gz",
            enqueue=True,
        )

    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(logging.getLevelName(log_lvl))

    for name in BRIDGED_LOGGERS:
        lg = logging.getLogger(name)
        lg.handlers = [InterceptHandler()]
        lg.propagate = False

    # SQL文の出力は多すぎるので抑える．
    logging.getLogger("sqlalchemy.engine.Engine").setLevel(logging.WARNING)

    logger.debug(f"Loguru configured (lvl={log_lvl}, to_file={to_file}, file={file_path})")


__all__ = ["logger", "setup_logging", "InterceptHandler"]
