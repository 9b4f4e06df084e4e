"""Logging, request logging and cost ledger plumbing."""

from .cost_ledger import CostLedgerAdapter, get_cost_ledger, set_cost_ledger
from .logging import StreamLogger
from .request_log import (
    add_request_logger,
    log_llm_error,
    log_llm_request,
    log_llm_response,
    remove_request_logger,
)
from .sinks import CostLedger, InMemoryCostLedger, InMemoryRequestLogger, RequestLogger

__all__ = [
    "StreamLogger",
    "CostLedger",
    "CostLedgerAdapter",
    "InMemoryCostLedger",
    "InMemoryRequestLogger",
    "RequestLogger",
    "get_cost_ledger",
    "set_cost_ledger",
    "add_request_logger",
    "remove_request_logger",
    "log_llm_request",
    "log_llm_response",
    "log_llm_error",
]
