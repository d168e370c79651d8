"""ログ設定。パッケージロガー drill_quiz にローテーション付きファイル出力を付ける。"""

import logging
import os
from logging.handlers import RotatingFileHandler

from .config import AppConfig

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _resolve_level(name: str) -> int:
    if name not in LOG_LEVELS:
        logging.getLogger(__name__).warning(
            "Unknown log level %r, using INFO", name
        )
        return logging.INFO
    return logging.getLevelName(name)


def setup_logging(config: AppConfig) -> logging.Logger:
    logger = logging.getLogger("drill_quiz")
    logger.setLevel(_resolve_level(str(config.log_level).upper()))

    if not os.path.exists(config.log_dir):
        os.makedirs(config.log_dir, exist_ok=True)
    log_path = os.path.abspath(os.path.join(config.log_dir, config.log_file))

    # Streamlit は再実行のたびにここを通るので、同じファイルへのハンドラは一度だけ
    for handler in logger.handlers:
        if (
            isinstance(handler, RotatingFileHandler)
            and handler.baseFilename == log_path
        ):
            return logger

    file_handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(file_handler)
    # 他ライブラリのログもコンソールに出す
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    return logger
