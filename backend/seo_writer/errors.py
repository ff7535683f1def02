"""
Error taxonomy shared by the gateways and the editor session
"""
from typing import Optional


class WriterError(Exception):
    """Base class for all failures surfaced to the editor"""


class NetworkError(WriterError):
    """The request could not be sent or no response was received"""


class UpstreamError(WriterError):
    """A dependent service answered with a non-success status"""

    def __init__(self, message: str, status_code: int = 502, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body or ""


class SchemaError(WriterError):
    """The response succeeded but did not have the expected shape"""


class PreconditionError(WriterError):
    """Local state makes the requested action invalid"""
