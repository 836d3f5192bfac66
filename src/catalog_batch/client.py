"""
Catalog items_batch client: one request per call, one aggregated result
"""
import json
import logging
import requests
from dataclasses import dataclass, replace
from typing import Any, Iterable, Optional

from .config import get_config
from .context import BACKGROUND, RequestContext
from .exceptions import (
    ApplicationError,
    DecodingError,
    EncodingError,
    ItemError,
    TransportError,
    ValidationError,
)
from .models import BatchRequest, BatchResponse, BatchResult, ErrorRecord, Request, ValidationStatus

logger = logging.getLogger(__name__)

_ERROR_FIELDS = ('message', 'type', 'code', 'fbtrace_id')

# Shared default executor
_default_session: Optional[requests.Session] = None

def get_default_session() -> requests.Session:
    global _default_session
    if _default_session is None:
        _default_session = requests.Session()
    return _default_session


@dataclass(frozen=True)
class ClientOptions:
    """Transport settings for a BatchClient; unset values fall back to defaults"""
    base_url: Optional[str] = None
    context: Optional[RequestContext] = None
    session: Optional[Any] = None  # anything with a requests.Session-style post()


class BatchClient:
    def __init__(self, api_version: str, catalog_id, options: Optional[ClientOptions] = None):
        self.api_version = api_version
        self.catalog_id = catalog_id
        self.options = options or ClientOptions()
        base_url = self.options.base_url or get_config().graph_base_url
        self._endpoint = f"{base_url.rstrip('/')}/{api_version}/{catalog_id}/items_batch"

    @classmethod
    def from_env(cls, options: Optional[ClientOptions] = None) -> "BatchClient":
        config = get_config()
        config.validate_target()
        return cls(config.api_version, config.catalog_id, options)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def context(self) -> RequestContext:
        return self.options.context or BACKGROUND

    @property
    def session(self):
        return self.options.session or get_default_session()

    def with_context(self, context: RequestContext) -> "BatchClient":
        """Return a copy of this client bound to ``context``"""
        return BatchClient(self.api_version, self.catalog_id, replace(self.options, context=context))

    def with_session(self, session) -> "BatchClient":
        """Return a copy of this client that posts through ``session``"""
        return BatchClient(self.api_version, self.catalog_id, replace(self.options, session=session))

    def build_request(self, operations: Iterable[Request], token: str, allow_upsert: bool = False) -> BatchRequest:
        return BatchRequest(access_token=token, requests=tuple(operations), allow_upsert=allow_upsert)

    def send(self, operations: Iterable[Request], token: str) -> BatchResult:
        """Submit update-only operations"""
        return self._submit(self.build_request(operations, token))

    def send_upsert(self, operations: Iterable[Request], token: str) -> BatchResult:
        """Submit operations, letting the service create items that do not exist yet"""
        return self._submit(self.build_request(operations, token, allow_upsert=True))

    def _submit(self, batch: BatchRequest) -> BatchResult:
        try:
            body = json.dumps(batch.to_dict(), allow_nan=False).encode('utf-8')
        except (TypeError, ValueError) as e:
            raise EncodingError(f"Unable to encode batch request: {e}") from e

        context = self.context
        # one clock read, so the checked deadline is the timeout handed to requests
        timeout = context.remaining()
        if context.cancelled():
            raise TransportError("context cancelled")
        if timeout is not None and timeout <= 0:
            raise TransportError("context deadline exceeded")

        logger.debug(f"Posting {len(batch.requests)} operation(s) to {self._endpoint} (allow_upsert={batch.allow_upsert})")
        try:
            response = self.session.post(
                self._endpoint,
                data=body,
                headers={'Content-Type': 'application/json'},
                timeout=timeout,
                stream=True,
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(str(e)) from e

        content = b''
        try:
            status_code = response.status_code
            logger.debug(f"items_batch responded with status {status_code}")
            if status_code != 204:
                try:
                    content = response.content
                except requests.exceptions.RequestException as e:
                    raise TransportError(str(e)) from e
        finally:
            response.close()

        # a context that finished during the exchange fails the call on every status
        reason = context.error()
        if reason:
            raise TransportError(reason)

        if status_code == 204:
            return BatchResult(status_code=204)
        return self._interpret(status_code, content)

    def _interpret(self, status_code: int, content: bytes) -> BatchResult:
        try:
            payload = json.loads(content)
        except ValueError as e:
            raise DecodingError(f"Response body is not valid JSON: {e}", content) from e
        if not isinstance(payload, dict):
            raise DecodingError("Response body is not a JSON object", content)

        parsed = _parse_batch_response(payload, content)
        if not parsed.handles:
            raise ApplicationError(_parse_error_shape(payload, content), status_code)

        errors = []
        for status in parsed.validation_status:
            for warning in status.warnings:
                logger.warning(f"Validation warning for {status.retailer_id}: {warning}")
            errors.extend(ItemError(status.retailer_id, e) for e in status.errors)
        if errors:
            raise ValidationError(errors, parsed)

        return BatchResult(
            status_code=status_code,
            handles=parsed.handles,
            validation_status=parsed.validation_status,
        )


def _field(obj: dict, key: str, default):
    """Value of ``key``; absent and JSON null both mean ``default``"""
    value = obj.get(key)
    return default if value is None else value


def _parse_batch_response(payload: dict, content: bytes) -> BatchResponse:
    handles = _field(payload, 'handles', [])
    if not isinstance(handles, list) or not all(isinstance(h, str) for h in handles):
        raise DecodingError("'handles' must be a list of strings", content)

    statuses = _field(payload, 'validation_status', [])
    if not isinstance(statuses, list):
        raise DecodingError("'validation_status' must be a list", content)

    parsed = []
    for entry in statuses:
        if not isinstance(entry, dict):
            raise DecodingError("'validation_status' entries must be objects", content)
        retailer_id = _field(entry, 'retailer_id', '')
        if not isinstance(retailer_id, str):
            raise DecodingError("'retailer_id' must be a string", content)
        parsed.append(ValidationStatus(
            retailer_id=retailer_id,
            errors=_parse_error_list(entry.get('errors'), content),
            warnings=_parse_error_list(entry.get('warnings'), content),
        ))
    return BatchResponse(handles=tuple(handles), validation_status=tuple(parsed))


def _parse_error_list(items, content: bytes):
    if items is None:
        return ()
    if not isinstance(items, list):
        raise DecodingError("validation errors and warnings must be lists", content)
    return tuple(_parse_error_record(item, content) for item in items)


def _parse_error_shape(payload: dict, content: bytes) -> ErrorRecord:
    # Graph API errors usually arrive wrapped as {"error": {...}}
    nested = payload.get('error')
    if isinstance(nested, dict):
        return _parse_error_record(nested, content)
    if any(key in payload for key in _ERROR_FIELDS):
        return _parse_error_record(payload, content)
    raise DecodingError("Response has neither handles nor an error", content)


def _parse_error_record(item, content: bytes) -> ErrorRecord:
    if not isinstance(item, dict):
        raise DecodingError("error records must be objects", content)
    message = _field(item, 'message', '')
    error_type = _field(item, 'type', '')
    fbtrace_id = _field(item, 'fbtrace_id', '')
    code = _field(item, 'code', 0)
    if not all(isinstance(v, str) for v in (message, error_type, fbtrace_id)):
        raise DecodingError("error message, type and fbtrace_id must be strings", content)
    if isinstance(code, bool) or not isinstance(code, int):
        raise DecodingError("error code must be an integer", content)
    return ErrorRecord(message=message, type=error_type, code=code, fbtrace_id=fbtrace_id)
