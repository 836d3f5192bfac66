"""
Exceptions raised by the catalog batch client
"""
from dataclasses import dataclass
from typing import List, Optional

from .models import BatchResponse, ErrorRecord


class CatalogBatchError(Exception):
    """Base class for all batch submission failures"""
    pass


class EncodingError(CatalogBatchError):
    """The request envelope could not be serialized; nothing was sent"""
    pass


class TransportError(CatalogBatchError):
    """The HTTP exchange could not be completed"""
    pass


class DecodingError(CatalogBatchError):
    """The response body matched neither the success nor the error shape"""

    def __init__(self, message: str, body: bytes = b""):
        super().__init__(message)
        self.body = body


class ApplicationError(CatalogBatchError):
    """The remote service rejected the whole batch"""

    def __init__(self, error: ErrorRecord, status_code: Optional[int] = None):
        super().__init__(str(error))
        self.error = error
        self.status_code = status_code

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def type(self) -> str:
        return self.error.type

    @property
    def code(self) -> int:
        return self.error.code

    @property
    def fbtrace_id(self) -> str:
        return self.error.fbtrace_id


@dataclass(frozen=True)
class ItemError:
    retailer_id: str
    error: ErrorRecord

    def __str__(self) -> str:
        return f"[{self.retailer_id}] {self.error}"


class ValidationError(CatalogBatchError):
    """
    One or more items failed validation in an otherwise accepted batch.

    Every per-item error is kept in ``errors``, in response order.
    """

    def __init__(self, errors: List[ItemError], response: BatchResponse):
        self.errors = list(errors)
        self.response = response
        super().__init__(self.render())

    @property
    def handles(self):
        return self.response.handles

    def render(self) -> str:
        lines = [f"{len(self.errors)} item validation error(s):"]
        lines.extend(str(e) for e in self.errors)
        return "\n".join(lines)
