# ABOUTME: Exception definitions for the turn responder boundary.
# ABOUTME: Responder timeouts and failures are retryable; exhausted retries surface as a generic 500.


class LLMCallFailed(Exception):
    """Raised when the OpenAI API call fails"""
    pass


class ResponderError(Exception):
    """Base class for retryable turn responder errors"""
    pass


class ResponderTimeout(ResponderError):
    """Raised when a responder call exceeds its timeout"""
    pass


class ResponderFailure(ResponderError):
    """Raised when a responder call fails or returns unusable output"""
    pass
