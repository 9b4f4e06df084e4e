from .usage import estimate_tokens, to_usage_record

__all__ = ["estimate_tokens", "to_usage_record"]
