"""In-memory sinks for testing and development."""

import logging
import threading
from typing import Any, Dict, List, Optional

from ...models.usage import UsageRecord

logger = logging.getLogger(__name__)


class InMemoryCostLedger:
    """Thread-safe append-only list of usage records.

    ``max_size`` bounds memory by dropping the oldest records; every drop is
    logged. Unbounded by default.
    """

    def __init__(self, max_size: Optional[int] = None):
        self.max_size = max_size
        self._records: List[UsageRecord] = []
        self._lock = threading.Lock()

    def add_usage(self, record: UsageRecord) -> None:
        with self._lock:
            self._records.append(record)
            if self.max_size and len(self._records) > self.max_size:
                dropped = len(self._records) - self.max_size
                self._records = self._records[-self.max_size:]
                logger.warning("Cost ledger full (max_size=%d), dropped %d oldest record(s)",
                               self.max_size, dropped)

    @property
    def records(self) -> List[UsageRecord]:
        with self._lock:
            return list(self._records)

    def totals(self) -> Dict[str, int]:
        records = self.records
        return {
            "input_tokens": sum(r.input_tokens for r in records),
            "output_tokens": sum(r.output_tokens for r in records),
            "cached_tokens": sum(r.cached_tokens for r in records),
            "image_count": sum(r.image_count for r in records),
        }

    def clear(self) -> None:
        with self._lock:
            self._records.clear()


class InMemoryRequestLogger:
    """Keeps request log entries by request id."""

    def __init__(self):
        self.requests: Dict[str, Dict[str, Any]] = {}
        self.responses: Dict[str, Dict[str, Any]] = {}
        self.errors: Dict[str, Dict[str, Any]] = {}

    def log_request(self, request_id: str, agent_id: str, provider: str, model: str,
                    payload: Dict[str, Any]) -> None:
        self.requests[request_id] = {
            "agent_id": agent_id,
            "provider": provider,
            "model": model,
            "payload": payload,
        }

    def log_response(self, request_id: str, payload: Dict[str, Any]) -> None:
        self.responses[request_id] = payload

    def log_error(self, request_id: str, payload: Dict[str, Any]) -> None:
        self.errors[request_id] = payload
