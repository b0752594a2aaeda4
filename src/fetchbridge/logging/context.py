"""Context variables injected into every log record."""

import secrets
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Dict, Iterator, Optional

_operation: ContextVar[Optional[str]] = ContextVar("operation", default=None)
_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def set_log_context(
    operation: Optional[str] = None,
    request_id: Optional[str] = None,
) -> None:
    """Set context values. Only non-None arguments are applied."""
    if operation is not None:
        _operation.set(operation)
    if request_id is not None:
        _request_id.set(request_id)


def get_log_context() -> Dict[str, Optional[str]]:
    """Return current context values."""
    return {
        "operation": _operation.get(),
        "request_id": _request_id.get(),
    }


def clear_log_context() -> None:
    """Reset all context values."""
    _operation.set(None)
    _request_id.set(None)


def generate_request_id() -> str:
    """
    Generate a short request identifier.

    Format: r-XXXXXXXX where X is random hex.
    """
    return f"r-{secrets.token_hex(4)}"


@contextmanager
def log_context(operation: str, request_id: Optional[str] = None) -> Iterator[str]:
    """
    Scope log context to a single operation.

    Previous values are restored on exit.

    Yields:
        The request ID in effect for the block
    """
    rid = request_id or generate_request_id()
    op_token = _operation.set(operation)
    rid_token = _request_id.set(rid)
    try:
        yield rid
    finally:
        _operation.reset(op_token)
        _request_id.reset(rid_token)
