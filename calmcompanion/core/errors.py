"""Error types raised inside the core and carried by CompletionResult"""
from typing import Optional


class CompanionError(Exception):
    """Base class for every error the companion core knows how to describe"""


class TransportError(CompanionError):
    """Non-success HTTP status, or the request never got a response"""

    def __init__(self, message: str, status: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body


class MissingCredentialError(CompanionError):
    """Direct mode was selected without an API key"""

    def __init__(self, message: str = "Missing API Key. Add it in Settings."):
        super().__init__(message)


class MalformedResponseError(CompanionError):
    """The endpoint answered 2xx but the body could not be read"""


class ImportDataError(CompanionError):
    """An import blob was not valid JSON or had an unexpected shape"""
