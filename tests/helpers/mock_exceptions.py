"""Mock exception classes for testing provider error handling."""

from typing import Dict, Optional


class MockHTTPResponse:
    """Mock HTTP response for exception testing."""

    def __init__(self, status_code: int, headers: Optional[Dict[str, str]] = None):
        self.status_code = status_code
        self.headers = {k.lower(): v for k, v in (headers or {}).items()}


class MockAPIError(Exception):
    """Shape shared by the OpenAI and Anthropic SDK status errors."""

    def __init__(self, message: str, response: Optional[MockHTTPResponse] = None):
        super().__init__(message)
        self.message = message
        self.response = response
        self.status_code = response.status_code if response else None


class MockRateLimitError(MockAPIError):
    def __init__(self, message: str = "Rate limit exceeded", retry_after: int = 60):
        super().__init__(message, MockHTTPResponse(429, {"Retry-After": str(retry_after)}))


class MockAuthenticationError(MockAPIError):
    def __init__(self, message: str = "Invalid API key"):
        super().__init__(message, MockHTTPResponse(401))


class MockBadRequestError(MockAPIError):
    def __init__(self, message: str = "Invalid request"):
        super().__init__(message, MockHTTPResponse(400))


class MockOverloadedError(MockAPIError):
    def __init__(self, message: str = "Overloaded"):
        super().__init__(message, MockHTTPResponse(529))
