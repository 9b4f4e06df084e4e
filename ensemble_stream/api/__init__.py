"""
Public API Layer

User-facing entry points of Ensemble Stream.
"""

from .client import EnsembleClient, stream_response

__all__ = ["EnsembleClient", "stream_response"]
