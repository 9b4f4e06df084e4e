# Streaming and provider constants shared across modules

# Delta buffer defaults
DELTA_INITIAL_THRESHOLD = 20
DELTA_MAX_THRESHOLD = 400
DELTA_THRESHOLD_STEP = 20
DELTA_FLUSH_INTERVAL_MS = 500

# Environment variables read by StreamingOptions.from_env()
ENV_DELTA_INITIAL_THRESHOLD = "ENSEMBLE_DELTA_INITIAL_THRESHOLD"
ENV_DELTA_MAX_THRESHOLD = "ENSEMBLE_DELTA_MAX_THRESHOLD"
ENV_DELTA_THRESHOLD_STEP = "ENSEMBLE_DELTA_THRESHOLD_STEP"
ENV_DELTA_FLUSH_INTERVAL_MS = "ENSEMBLE_DELTA_FLUSH_INTERVAL_MS"
ENV_DELTA_BUFFERING = "ENSEMBLE_DELTA_BUFFERING"
ENV_CAPTURE_RAW_EVENTS = "ENSEMBLE_CAPTURE_RAW_EVENTS"

# Usage estimation
CHARS_PER_TOKEN = 4

# Citations
REFERENCES_HEADING = "References:"

# OpenAI
OPENAI_DEFAULT_TIMEOUT = 60.0
OPENAI_REASONING_EFFORTS = {
    "-low": "low",
    "-medium": "medium",
    "-high": "high",
}
OPENAI_WEB_SEARCH_TOOL_NAMES = ("openai_web_search", "web_search")
OPENAI_IMAGE_MAX_HEIGHT = 2000
ID_PREFIX_FUNCTION_CALL = "fc_"
ID_PREFIX_MESSAGE = "msg_"

# Anthropic
ANTHROPIC_DEFAULT_TIMEOUT = 60.0
ANTHROPIC_DEFAULT_MAX_TOKENS = 8192
ANTHROPIC_THINKING_BUDGETS = {
    "-low": 0,
    "-medium": 8000,
    "-high": 15000,
    "-max": 30000,
}
ANTHROPIC_DEFAULT_THINKING_BUDGET = 8000
ANTHROPIC_THINKING_MODELS = ("claude-sonnet-4", "claude-opus-4", "claude-3-7-sonnet")
ANTHROPIC_INTERLEAVED_THINKING_MODELS = ("claude-sonnet-4", "claude-opus-4")
ANTHROPIC_INTERLEAVED_THINKING_BETA = "interleaved-thinking-2025-05-14"
ANTHROPIC_WEB_SEARCH_TOOL_NAME = "claude_web_search"
ANTHROPIC_WEB_SEARCH_TOOL = {"type": "web_search_20250305", "name": "web_search"}
DEFAULT_EMPTY_CONVERSATION_PROMPT = "Let's think this through step by step."

# Model identifier prefixes per provider
PROVIDER_MODEL_PREFIXES = {
    "openai": ("gpt-", "chatgpt-", "o1", "o3", "o4", "codex-", "computer-use-"),
    "anthropic": ("claude-",),
}
