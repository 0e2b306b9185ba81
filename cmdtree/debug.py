# cmdtree CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""debug.py"""
from __future__ import annotations

import time
from typing import TYPE_CHECKING

from cmdtree.command import Handler
from cmdtree.logger import logger

if TYPE_CHECKING:
    from cmdtree.invocation import Invocation


def log_before(inv: Invocation) -> None:
    """Log the start of a handler."""
    args = ", ".join(map(repr, inv.args))
    logger.info("[%s] Starting -> args(%s)", inv.command.full_name, args)


def log_success(inv: Invocation, duration: float) -> None:
    """Log the successful completion of a handler."""
    logger.debug("[%s] Success in %.3fs", inv.command.full_name, duration)


def log_error(inv: Invocation, error: Exception, duration: float) -> None:
    """Log an error raised by a handler."""
    logger.error(
        "[%s] Error (%s) after %.3fs: %s",
        inv.command.full_name,
        type(error).__name__,
        duration,
        error,
        exc_info=True,
    )


def logging_middleware(next_handler: Handler) -> Handler:
    """Middleware that logs start, success, failure and duration of a handler."""

    async def handler(inv: Invocation) -> None:
        log_before(inv)
        start = time.perf_counter()
        try:
            await next_handler(inv)
        except Exception as error:
            log_error(inv, error, time.perf_counter() - start)
            raise
        log_success(inv, time.perf_counter() - start)

    return handler
