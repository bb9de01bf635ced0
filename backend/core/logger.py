# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Logging for tagvault.

Levels, handlers and formats live in etc/logging.conf (``fileConfig``
format).  The file refers to the log file as %(log_file)s; that placeholder
is filled in here before the config is applied.

    from core.logger import logger, partition_label

What may be logged: method, path, status, latency, error class names and
``partition_label(...)``.  What may not: credentials, keys, plaintext targets
or tags, envelopes, query strings.
"""

import configparser
import logging
import logging.config
import os
from pathlib import Path
from typing import Optional

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_LOGGING_CONF = _PROJECT_ROOT / "etc" / "logging.conf"

LOGGER_NAME = "tagvault"


def _default_log_dir() -> Path:
    return Path(os.environ.get("TAGVAULT_LOG_DIR", _PROJECT_ROOT / "log"))


def _load_config(conf_path: Path, log_file: Path) -> configparser.RawConfigParser:
    # Raw parser: %(asctime)s and friends must reach logging untouched
    parser = configparser.RawConfigParser()
    parser.read_string(
        conf_path.read_text(encoding="utf-8").replace("%(log_file)s", log_file.as_posix())
    )
    return parser


def configure_logging(log_dir: Optional[Path] = None,
                      conf_path: Path = _LOGGING_CONF) -> logging.Logger:
    """Apply *conf_path*, writing app.log under *log_dir*; return the app logger."""
    log_dir = Path(log_dir) if log_dir is not None else _default_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    logging.config.fileConfig(
        _load_config(conf_path, log_dir / "app.log"),
        disable_existing_loggers=False,
    )
    return logging.getLogger(LOGGER_NAME)


def partition_label(partition_hash: str) -> str:
    """Short, log-safe handle for a partition (first 12 hex chars)."""
    return partition_hash[:12]


logger = configure_logging()
