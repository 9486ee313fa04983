"""Logging bridge into EDMC plus the optional diagnostic log file."""
from __future__ import annotations

import importlib
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Optional, Tuple


EDMC_DEFAULT_LOG_LEVEL = logging.INFO
DIAGNOSTIC_MAX_BYTES = 256 * 1024
_LEVEL_NAME_MAP = {
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "TRACE": logging.DEBUG,
}


def _load_edmc_config_module() -> Optional[Any]:
    try:
        return importlib.import_module("config")
    except Exception:
        return None


def _coerce_level(raw: Any) -> Optional[int]:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        token = raw.strip().upper()
        if token.isdigit():
            return int(token)
        return _LEVEL_NAME_MAP.get(token)
    return None


def resolve_edmc_logger() -> Tuple[Optional[logging.Logger], Optional[Callable[[str], None]]]:
    module = _load_edmc_config_module()
    if module is None:
        return None, None
    logger_obj = getattr(module, "logger", None)
    config_obj = getattr(module, "config", None)
    legacy_log = getattr(config_obj, "log", None) if config_obj is not None else None
    return logger_obj if isinstance(logger_obj, logging.Logger) else None, legacy_log if callable(legacy_log) else None


def resolve_edmc_log_level() -> int:
    module = _load_edmc_config_module()
    candidates: list[int] = []
    if module is not None:
        config_obj = getattr(module, "config", None)
        if config_obj is not None:
            for attr in ("log_level", "loglevel", "logLevel"):
                coerced = _coerce_level(getattr(config_obj, attr, None))
                if coerced is not None:
                    candidates.append(coerced)
                    break
            getter = getattr(config_obj, "get", None)
            if callable(getter):
                try:
                    coerced = _coerce_level(getter("loglevel"))
                    if coerced is not None:
                        candidates.append(coerced)
                except Exception:
                    pass
        logger_obj = getattr(module, "logger", None)
        if isinstance(logger_obj, logging.Logger):
            candidates.append(logger_obj.getEffectiveLevel())
    candidates.append(logging.getLogger().getEffectiveLevel())
    candidates.append(EDMC_DEFAULT_LOG_LEVEL)

    for level in candidates:
        if isinstance(level, int) and level != logging.NOTSET:
            return level
    return EDMC_DEFAULT_LOG_LEVEL


class EDMCLogHandler(logging.Handler):
    """Logging bridge that always respects EDMC's configured log level."""

    def __init__(self, logger_name: str) -> None:
        super().__init__()
        self._logger_name = logger_name

    def emit(self, record: logging.LogRecord) -> None:
        target_level = resolve_edmc_log_level()
        plugin_logger = logging.getLogger(self._logger_name)
        if plugin_logger.level != target_level:
            plugin_logger.setLevel(target_level)
        if record.levelno < target_level:
            return
        message = self.format(record)
        edmc_logger, legacy_log = resolve_edmc_logger()
        if edmc_logger is not None:
            try:
                if edmc_logger.isEnabledFor(record.levelno):
                    edmc_logger.log(record.levelno, message)
                    return
            except Exception:
                pass
        if legacy_log is not None:
            try:
                legacy_log(message)
                return
            except Exception:
                pass
        root_logger = logging.getLogger()
        if root_logger.isEnabledFor(record.levelno):
            root_logger.log(record.levelno, message)


def configure_logger(name: str, tag: str) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(resolve_edmc_log_level())
    if not any(getattr(handler, "_edmc_handler", False) for handler in logger.handlers):
        handler = EDMCLogHandler(name)
        handler._edmc_handler = True  # type: ignore[attr-defined]
        handler.setFormatter(logging.Formatter(f"[%(asctime)s] [{tag}] %(message)s", "%H:%M:%S"))
        logger.addHandler(handler)
    logger.propagate = False
    return logger


def build_rotating_handler(
    log_dir: Path,
    filename: str,
    *,
    retention: int,
    max_bytes: int = DIAGNOSTIC_MAX_BYTES,
    formatter: Optional[logging.Formatter] = None,
) -> logging.Handler:
    """Construct a rotating file handler for the diagnostic log."""
    retention = max(1, retention)
    backup_count = max(0, retention - 1)
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / filename,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    if formatter is not None:
        handler.setFormatter(formatter)
    handler.setLevel(logging.DEBUG)
    return handler


def configure_diagnostic_logger(
    name: str,
    log_dir: Path,
    filename: str,
    *,
    enabled: bool,
    retention: int,
) -> Optional[logging.Logger]:
    """Return a file-only logger for diagnostics, or ``None`` when disabled.

    Existing file handlers are always closed first so retention changes and
    disabling take effect immediately.
    """

    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    if not enabled:
        return None
    handler = build_rotating_handler(
        log_dir,
        filename,
        retention=retention,
        formatter=logging.Formatter("%(asctime)s %(levelname)s %(message)s"),
    )
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    return logger
