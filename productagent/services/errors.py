"""Errors raised by the image loader and the agent clients"""
from typing import Optional


class UnsupportedInput(Exception):
    """Raised when no usable image file was provided"""
    pass


class AgentError(Exception):
    """Base class for failures of a single agent stage"""

    def __init__(self, agent: str, message: str):
        super().__init__(message)
        self.agent = agent


class AgentRequestFailed(AgentError):
    """Endpoint answered with a non-success HTTP status"""

    def __init__(self, agent: str, status: int, body: str = "", action: str = "failed to respond"):
        super().__init__(agent, f"{agent} Agent {action} (HTTP {status})")
        self.status = status
        self.body = body


class AgentEmptyResult(AgentError):
    """Response parsed, but the expected payload is missing"""
    pass


class UnexpectedFailure(AgentError):
    """Any other exception raised while an agent stage was running"""

    def __init__(self, agent: str, original: Optional[BaseException] = None):
        # TimeoutError and friends stringify to ""
        detail = (str(original) or type(original).__name__) if original is not None else "An unexpected error occurred."
        message = f"{agent} Agent: unexpected error: {detail}"
        super().__init__(agent, message)
        self.original = original
