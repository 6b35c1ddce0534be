"""Configure logging for gridtable."""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any, TextIO

log = logging.getLogger(__name__)

LOG_FORMAT = (
    "{asctime}.{msecs:03.0f} {levelname:<7} [{name}.{funcName}:{lineno}] {message}"
)


def dict_merge(target_dict: dict, input_dict: dict) -> None:
    """Merge the second dictionary onto the first."""
    for k in input_dict:
        if k in target_dict:
            if isinstance(target_dict[k], dict) and isinstance(input_dict[k], dict):
                dict_merge(target_dict[k], input_dict[k])
            elif isinstance(target_dict[k], list) and isinstance(input_dict[k], list):
                target_dict[k] = [*target_dict[k], *input_dict[k]]
            else:
                target_dict[k] = input_dict[k]
        else:
            target_dict[k] = input_dict[k]


def setup_logs(
    level: str = "INFO",
    stream: TextIO | None = None,
    log_file: str | Path | None = None,
    log_config: dict[str, Any] | None = None,
) -> None:
    """Configure the logger for gridtable.

    Args:
        level: The lowest level of message to log
        stream: The stream to which log messages are written. Standard error is
            used if not given
        log_file: A file to which log messages are also written
        log_config: Additional :py:func:`logging.config.dictConfig` settings, merged
            onto the defaults

    """
    level = level.upper()
    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "file_format": {
                "format": LOG_FORMAT,
                "style": "{",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "stream": {
                "level": level,
                "class": "logging.StreamHandler",
                "formatter": "file_format",
                **({"stream": stream} if stream is not None else {}),
            },
        },
        "loggers": {
            "gridtable": {
                "level": level,
                "handlers": ["stream"],
                "propagate": False,
            },
        },
    }

    # Configure file handler
    if log_file:
        config["handlers"]["file"] = {
            "level": level,
            "class": "logging.FileHandler",
            "filename": Path(log_file).expanduser(),
            "formatter": "file_format",
        }
        config["loggers"]["gridtable"]["handlers"].append("file")

    # Update log_config based on additional config dict provided
    if log_config:
        dict_merge(config, log_config)

    logging.config.dictConfig(config)
    log.debug("Logging configured at level %s", level)
