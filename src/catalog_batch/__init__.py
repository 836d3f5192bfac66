"""
Catalog Batch Client Package
"""
from .client import BatchClient, ClientOptions
from .context import RequestContext
from .models import Applink, BatchRequest, BatchResult, ErrorRecord, Media, Method, Product, Request
from .exceptions import (
    ApplicationError,
    CatalogBatchError,
    DecodingError,
    EncodingError,
    TransportError,
    ValidationError,
)
from .config import Config, get_config

__all__ = [
    'BatchClient', 'ClientOptions', 'RequestContext',
    'Applink', 'BatchRequest', 'BatchResult', 'ErrorRecord', 'Media', 'Method', 'Product', 'Request',
    'ApplicationError', 'CatalogBatchError', 'DecodingError', 'EncodingError', 'TransportError', 'ValidationError',
    'Config', 'get_config',
]
