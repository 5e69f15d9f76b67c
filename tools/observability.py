"""Call-level logging for service methods."""

from __future__ import annotations

import inspect
import logging
import time
from functools import wraps
from typing import Any, Callable, Dict, ParamSpec, TypeVar

from smartfit_app.logging_config import ensure_correlation_id, get_logger, log_event

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")

_PREVIEW_KEYS = 6


def _call_arguments(signature: inspect.Signature, args: tuple, kwargs: dict) -> Dict[str, Any]:
    """Name the arguments of a call, dropping ``self`` and capping the count."""

    try:
        bound = signature.bind_partial(*args, **kwargs)
    except TypeError:
        return {"unbound": True}
    arguments = {key: value for key, value in bound.arguments.items() if key != "self"}
    if len(arguments) > _PREVIEW_KEYS:
        arguments = dict(list(arguments.items())[:_PREVIEW_KEYS])
        arguments["truncated"] = True
    return arguments


def instrument_service(operation: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Log ``service_call_started`` / ``completed`` / ``failed`` around a method.

    Argument values pass through ``log_event`` and are redacted there.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        signature = inspect.signature(func)

        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = ensure_correlation_id()
            start = time.perf_counter()
            log_event(
                LOGGER,
                logging.INFO,
                "service_call_started",
                operation=operation,
                arguments=_call_arguments(signature, args, kwargs),
                correlation_id=correlation_id,
            )
            try:
                result = func(*args, **kwargs)
            except ValueError as exc:
                # Caller errors; the HTTP layer turns these into 4xx responses.
                log_event(
                    LOGGER,
                    logging.WARNING,
                    "service_call_rejected",
                    operation=operation,
                    error=str(exc),
                    error_type=type(exc).__name__,
                    duration_ms=round((time.perf_counter() - start) * 1000, 2),
                    correlation_id=correlation_id,
                )
                raise
            except Exception:
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "service_call_failed",
                    operation=operation,
                    duration_ms=round((time.perf_counter() - start) * 1000, 2),
                    correlation_id=correlation_id,
                    exc_info=True,
                )
                raise
            log_event(
                LOGGER,
                logging.INFO,
                "service_call_completed",
                operation=operation,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
                correlation_id=correlation_id,
            )
            return result

        return wrapper

    return decorator


__all__ = ["instrument_service"]
