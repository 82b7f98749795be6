"""ロギング設定"""
import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# 同期のたびに大量に出力されるライブラリのロガー
NOISY_LOGGERS = ("urllib3", "google", "httpx")

_configured_level: Optional[int] = None


def setup_logging(
    level: str = "INFO",
    enable_cloud_logging: bool = False,
    project_id: Optional[str] = None,
    stream: TextIO = sys.stdout,
) -> None:
    """
    ルートロガーを設定（2回目以降はレベルの変更のみ）

    Args:
        level: ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_cloud_logging: Cloud Loggingにも送信するか
        project_id: GCPプロジェクトID (Cloud Logging有効時に使用)
        stream: コンソール出力先
    """
    global _configured_level

    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if _configured_level is not None:
        for handler in root_logger.handlers:
            handler.setLevel(log_level)
        _configured_level = log_level
        return

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    root_logger.addHandler(console_handler)

    if enable_cloud_logging:
        _add_cloud_logging_handler(root_logger, log_level, project_id)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured_level = log_level
    root_logger.info(f"Logging configured with level: {logging.getLevelName(log_level)}")


def _add_cloud_logging_handler(
    root_logger: logging.Logger, log_level: int, project_id: Optional[str]
) -> None:
    """Cloud Loggingのハンドラーを追加（google-cloud-loggingが必要）"""
    try:
        from google.cloud import logging as cloud_logging

        client = cloud_logging.Client(project=project_id)
        handler = cloud_logging.handlers.CloudLoggingHandler(
            client, name="hospital-finder-sync"
        )
        handler.setLevel(log_level)
        root_logger.addHandler(handler)
        root_logger.info("Cloud Logging enabled")
    except Exception as e:
        # コンソール出力だけで続行する
        root_logger.warning(f"Failed to enable Cloud Logging: {e}")


def get_logger(name: str) -> logging.Logger:
    """モジュール用のロガーを取得（通常は__name__を指定）"""
    return logging.getLogger(name)
