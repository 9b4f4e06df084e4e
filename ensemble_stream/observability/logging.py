"""
Structured logging for provider streams.

Every provider and the translator log through a ``StreamLogger`` so that
records carry the same fields: provider, model and request_id, rendered
as ``[provider=openai model=gpt-4.1 request_id=ab12cd34] message``.
"""

import logging
import time
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from ..models.usage import UsageRecord


class StreamLogger:
    """Structured logger bound to one provider name."""

    def __init__(self, provider_name: str):
        self.provider = provider_name
        self.logger = logging.getLogger(f"ensemble_stream.providers.{provider_name}")

    def _format_message(self, message: str, **kwargs) -> str:
        fields = [f"provider={self.provider}"]
        for key, value in kwargs.items():
            if value is not None:
                fields.append(f"{key}={value}")
        return f"[{' '.join(fields)}] {message}"

    def debug(self, message: str, model: Optional[str] = None,
              request_id: Optional[str] = None, **kwargs):
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(
                self._format_message(message, model=model, request_id=request_id, **kwargs)
            )

    def info(self, message: str, model: Optional[str] = None,
             request_id: Optional[str] = None, **kwargs):
        self.logger.info(
            self._format_message(message, model=model, request_id=request_id, **kwargs)
        )

    def warning(self, message: str, model: Optional[str] = None,
                request_id: Optional[str] = None, **kwargs):
        self.logger.warning(
            self._format_message(message, model=model, request_id=request_id, **kwargs)
        )

    def error(self, message: str, model: Optional[str] = None,
              request_id: Optional[str] = None, error: Optional[BaseException] = None, **kwargs):
        if error is not None:
            kwargs['error_type'] = type(error).__name__
            kwargs['error_msg'] = str(error)
        self.logger.error(
            self._format_message(message, model=model, request_id=request_id, **kwargs)
        )

    @contextmanager
    def track_request(self, method: str, model: str,
                      request_id: Optional[str] = None) -> Iterator[Dict[str, Any]]:
        """
        Time a request and log its start, completion or failure.

        Yields:
            Dict with request metadata including request_id
        """
        if request_id is None:
            request_id = str(uuid.uuid4())[:8]

        start_time = time.time()
        self.debug(f"Starting {method} request", model=model, request_id=request_id)

        metadata = {
            'request_id': request_id,
            'model': model,
            'method': method,
            'start_time': start_time,
        }

        try:
            yield metadata
        except Exception as e:
            self.error(
                f"Failed {method} request",
                model=model,
                request_id=request_id,
                duration_ms=int((time.time() - start_time) * 1000),
                error=e,
            )
            raise
        else:
            self.info(
                f"Completed {method} request",
                model=model,
                request_id=request_id,
                duration_ms=int((time.time() - start_time) * 1000),
            )

    def log_usage(self, record: UsageRecord, request_id: Optional[str] = None):
        """Log a usage record handed to the cost ledger."""
        self.info(
            "Token usage",
            model=record.model,
            request_id=request_id,
            input_tokens=record.input_tokens,
            output_tokens=record.output_tokens,
            cached_tokens=record.cached_tokens or None,
            images=record.image_count or None,
        )
