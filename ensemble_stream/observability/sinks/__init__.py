"""Collaborator sinks for usage records and request logs."""

from .base import CostLedger, RequestLogger
from .in_memory import InMemoryCostLedger, InMemoryRequestLogger

__all__ = ["CostLedger", "RequestLogger", "InMemoryCostLedger", "InMemoryRequestLogger"]
