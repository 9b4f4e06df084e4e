"""Base interfaces for collaborator sinks."""

from typing import Any, Dict, Protocol

from ...models.usage import UsageRecord


class CostLedger(Protocol):
    """Append-only usage ledger. Must tolerate calls from concurrent streams."""

    def add_usage(self, record: UsageRecord) -> None:
        ...


class RequestLogger(Protocol):
    """Receives request/response/error payloads keyed by request id."""

    def log_request(self, request_id: str, agent_id: str, provider: str, model: str,
                    payload: Dict[str, Any]) -> None:
        ...

    def log_response(self, request_id: str, payload: Dict[str, Any]) -> None:
        ...

    def log_error(self, request_id: str, payload: Dict[str, Any]) -> None:
        ...
