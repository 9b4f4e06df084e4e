"""
Request logger registry.

Providers report every request, response and error here; the payloads fan
out to all registered ``RequestLogger`` sinks. Logging is fire-and-forget:
a failing sink is logged and never interrupts a stream.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from .sinks.base import RequestLogger

logger = logging.getLogger(__name__)

_loggers: List[RequestLogger] = []


def add_request_logger(sink: RequestLogger) -> None:
    if sink not in _loggers:
        _loggers.append(sink)


def remove_request_logger(sink: RequestLogger) -> None:
    if sink in _loggers:
        _loggers.remove(sink)


def clear_request_loggers() -> None:
    _loggers.clear()


def log_llm_request(
    agent_id: str,
    provider: str,
    model: str,
    payload: Dict[str, Any],
    request_id: Optional[str] = None,
) -> str:
    """Record an outgoing request and return its request id."""
    request_id = request_id or str(uuid.uuid4())
    for sink in list(_loggers):
        try:
            sink.log_request(request_id, agent_id, provider, model, payload)
        except Exception as e:
            logger.error("Request logger %s failed on request: %s", type(sink).__name__, e)
    return request_id


def log_llm_response(request_id: Optional[str], payload: Dict[str, Any]) -> None:
    if request_id is None:
        return
    for sink in list(_loggers):
        try:
            sink.log_response(request_id, payload)
        except Exception as e:
            logger.error("Request logger %s failed on response: %s", type(sink).__name__, e)


def log_llm_error(request_id: Optional[str], payload: Dict[str, Any]) -> None:
    if request_id is None:
        return
    for sink in list(_loggers):
        try:
            sink.log_error(request_id, payload)
        except Exception as e:
            logger.error("Request logger %s failed on error: %s", type(sink).__name__, e)
