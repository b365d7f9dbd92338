"""
utils/loggers.py

Purpose
-------
One place to obtain the application logger and to emit structured events
(save/load of snapshots, store mutations, session bootstrap).

Public API
----------
- get_logger(name="store_ledger", file_path=None) -> logging.Logger
- log_event(logger, op, phase, message, extra=None, level=INFO)
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

__all__ = ["get_logger", "log_event", "JsonLineFormatter"]

_LOGGER_NAME = "store_ledger"


class JsonLineFormatter(logging.Formatter):
    """
    Minimal JSON-lines formatter:
      {"ts":"2026-10-17T12:00:01.123Z","level":"INFO","name":"store_ledger","msg":"...","extra":{...}}
    """
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        if hasattr(record, "extra_payload") and isinstance(record.extra_payload, dict):
            payload["extra"] = record.extra_payload
        return json.dumps(payload, ensure_ascii=False, default=str)


def get_logger(name: str = _LOGGER_NAME, file_path: Optional[str | Path] = None) -> logging.Logger:
    """
    Return the named logger, configuring handlers only on first use.

    Console output uses the plain "time [LEVEL] name: message" format. When
    `file_path` is given, events are also appended there as JSON lines.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(logging.INFO)
        ch = logging.StreamHandler()
        ch.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(ch)

    if file_path is not None:
        target = str(Path(file_path))
        for h in logger.handlers:
            if isinstance(h, logging.FileHandler) and h.baseFilename == str(Path(target).resolve()):
                return logger
        Path(target).parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(target, mode="a", encoding="utf-8", delay=True)
        fh.setFormatter(JsonLineFormatter())
        logger.addHandler(fh)
    return logger


def log_event(
    logger: logging.Logger,
    op: str,
    phase: str,
    message: str,
    extra: Dict[str, object] | None = None,
    level: int = logging.INFO,
) -> None:
    """
    Log a structured event line.

    Args:
        logger: Obtained from get_logger().
        op: Operation name, e.g. "save", "load", "catalog", "entries".
        phase: Phase within the operation, e.g. "add", "remove", "snapshot".
        message: Human-readable short message.
        extra: Optional additional key/values (ids, counts, slot keys).
        level: Logging level (default INFO).
    """
    extra_payload: Dict[str, object] = {"op": op, "phase": phase}
    if extra:
        # required keys win
        for k, v in extra.items():
            if k not in extra_payload:
                extra_payload[k] = v
    logger.log(level, message, extra={"extra_payload": extra_payload})
