# src/pokemon_mcts/loguru_logger.py

import os
import sys
from pathlib import Path

from loguru import logger

DECISION_CHANNEL = "decisions"

logger.remove()
logger.add(
    sys.stderr,
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    filter=lambda record: record["extra"].get("channel") != DECISION_CHANNEL,
)

# Decision lines go to the persistent log only.
decision_logger = logger.bind(channel=DECISION_CHANNEL)

_decision_sinks: dict[str, int] = {}


def _is_decision(record) -> bool:
    return record["extra"].get("channel") == DECISION_CHANNEL


def add_decision_log(path: str | os.PathLike) -> int:
    """Append decision lines to `path`, one line per decision.

    The file is opened in append mode, so it accumulates across runs.
    Registering the same path twice returns the existing sink id.
    """
    key = str(Path(path).resolve())
    if key not in _decision_sinks:
        _decision_sinks[key] = logger.add(
            path,
            mode="a",
            level="INFO",
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {message}",
            filter=_is_decision,
            delay=True,
        )
    return _decision_sinks[key]


def remove_decision_log(path: str | os.PathLike):
    """Close the sink of `path` if one is registered."""
    sink_id = _decision_sinks.pop(str(Path(path).resolve()), None)
    if sink_id is not None:
        logger.remove(sink_id)
