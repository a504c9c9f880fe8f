from __future__ import annotations

import logging
import sys

import structlog

from .context import get_actor_id, get_request_id

# Libraries that log every HTTP round trip at INFO.
_NOISY_LOGGERS = ("botocore", "boto3", "urllib3", "httpx")

_CONFIGURED = False


def _add_request_context(_: logging.Logger, __: str, event_dict: dict) -> dict:
    rid = get_request_id()
    if rid:
        event_dict.setdefault("request_id", rid)
    actor_id = get_actor_id()
    if actor_id is not None:
        event_dict.setdefault("actor_id", actor_id)
    return event_dict


def _shared_processors() -> list:
    return [
        _add_request_context,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def configure_logging(*, level: str | int = "INFO", fmt: str = "json") -> None:
    """
    Route stdlib logging and structlog through one handler on stdout.

    `fmt="json"` emits one JSON object per line (deployments);
    `fmt="console"` uses structlog's coloured dev renderer.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    renderer = (
        structlog.dev.ConsoleRenderer()
        if str(fmt).strip().lower() == "console"
        else structlog.processors.JSONRenderer()
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=_shared_processors())
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level.upper() if isinstance(level, str) else level)

    # uvicorn installs its own handlers; send its records through root instead.
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uv = logging.getLogger(name)
        uv.handlers = []
        uv.propagate = True
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _CONFIGURED = True


def get_logger(name: str | None = None):
    return structlog.get_logger(name)
