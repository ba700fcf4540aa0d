"""Context helpers that enrich log records with structured metadata."""
from __future__ import annotations

import contextvars
import logging


_context_var: contextvars.ContextVar[dict[str, object]] = contextvars.ContextVar(
    "log_context", default={}
)


class LogContext:
    """Bind request-scoped values (request id, user id) to subsequent log records."""

    def bind(self, **values: object) -> contextvars.Token:
        current = dict(_context_var.get())
        current.update({k: v for k, v in values.items() if v is not None})
        return _context_var.set(current)

    def reset(self, token: contextvars.Token) -> None:
        _context_var.reset(token)


class ContextFilter(logging.Filter):
    """Attach contextual key-value pairs to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = _context_var.get()
        if context:
            record.context = " ".join(f"{k}={v}" for k, v in context.items()) + " "
        else:
            record.context = ""
        return True


log_context = LogContext()
