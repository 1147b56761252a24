"""
Currency Converter — 集中式 Logging 設定
- console 輸出（讓 Docker logs 可直接使用）
- 可選的每日輪替檔案 (TimedRotatingFileHandler)，保留 LOG_BACKUP_COUNT 天
- 所有模組透過 get_logger(__name__) 取得 logger
- LOG_FORMAT=json 切換為單行 JSON 結構化輸出
- LOG_LEVEL 調整 log 等級（預設 INFO）；LOG_TO_FILE=false 停用檔案輸出
- 每筆紀錄都帶有 request_id（由 api.middleware 設定）
"""

import contextvars
import json
import logging
import os
from logging.handlers import TimedRotatingFileHandler

LOG_DIR = os.getenv("LOG_DIR", "/app/data/logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE_NAME = os.getenv("LOG_FILE_NAME", "currency.log")
LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", "3"))
_LOG_TO_FILE = os.getenv("LOG_TO_FILE", "true").lower() not in ("0", "false", "no")
_LOG_FORMAT_ENV = os.getenv("LOG_FORMAT", "text").lower()

_TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(request_id)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Per-request correlation ID; "-" outside of a request.
request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "request_id", default="-"
)

# Noisy third-party loggers kept at WARNING.
_QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "slowapi")

_root_configured = False


class _RequestIdFilter(logging.Filter):
    """Copies the current request_id onto every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()  # type: ignore[attr-defined]
        return True


class _JsonFormatter(logging.Formatter):
    """One JSON object per line, for log shippers (Loki, Seq, ELK)."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "timestamp": self.formatTime(record, LOG_DATE_FORMAT),
            "level": record.levelname,
            "request_id": getattr(record, "request_id", "-"),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stack_info"] = self.formatStack(record.stack_info)
        return json.dumps(entry, ensure_ascii=False)


def _make_formatter() -> logging.Formatter:
    if _LOG_FORMAT_ENV == "json":
        return _JsonFormatter()
    return logging.Formatter(_TEXT_FORMAT, datefmt=LOG_DATE_FORMAT)


def _make_file_handler(formatter: logging.Formatter) -> logging.Handler:
    os.makedirs(LOG_DIR, exist_ok=True)
    handler = TimedRotatingFileHandler(
        filename=os.path.join(LOG_DIR, LOG_FILE_NAME),
        when="midnight",
        interval=1,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
        utc=True,
    )
    handler.suffix = "%Y-%m-%d"
    handler.setLevel(LOG_LEVEL)
    handler.setFormatter(formatter)
    return handler


def _configure_root_logger() -> None:
    """設定 root logger（僅執行一次）。"""
    global _root_configured
    if _root_configured:
        return

    root = logging.getLogger()
    root.setLevel(LOG_LEVEL)
    formatter = _make_formatter()

    # Filters sit on handlers: records propagated from child loggers skip root-logger filters.
    console_handler = logging.StreamHandler()
    console_handler.setLevel(LOG_LEVEL)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(_RequestIdFilter())
    root.addHandler(console_handler)

    if _LOG_TO_FILE:
        file_handler = _make_file_handler(formatter)
        file_handler.addFilter(_RequestIdFilter())
        root.addHandler(file_handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _root_configured = True


def get_logger(name: str) -> logging.Logger:
    """取得指定名稱的 logger，自動確保 root logger 已設定。"""
    _configure_root_logger()
    return logging.getLogger(name)
