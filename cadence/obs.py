"""
Cadence Logging - Simple logging wrapper.

Standard Python logging with an instrument decorator for call tracing.
"""
import asyncio
import functools
import inspect
import logging
import os
import sys

from cadence.paths import paths
from cadence.version import __version__


class InstrumentedLogger(logging.Logger):
    """Logger with instrument decorator for method tracing."""

    def instrument(self, message_template: str = ""):
        """
        Decorator that logs entry to a function/method.

        Args:
            message_template: Format string that can reference {self} and any
                named argument of the decorated callable.
        """
        def decorator(func):
            signature = inspect.signature(func)

            def render(args, kwargs) -> str:
                try:
                    bound = signature.bind(*args, **kwargs)
                    bound.apply_defaults()
                    return message_template.format(**bound.arguments)
                except (KeyError, AttributeError, IndexError, TypeError):
                    return message_template

            @functools.wraps(func)
            def sync_wrapper(*args, **kwargs):
                msg = render(args, kwargs)
                if msg:
                    self.info(msg)
                return func(*args, **kwargs)

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                msg = render(args, kwargs)
                if msg:
                    self.info(msg)
                return await func(*args, **kwargs)

            # Return appropriate wrapper based on function type
            if asyncio.iscoroutinefunction(func):
                return async_wrapper
            return sync_wrapper

        return decorator


def get_logger(name: str, version: str = "") -> InstrumentedLogger:
    """Create an instrumented logger."""
    logging.setLoggerClass(InstrumentedLogger)

    logger = logging.getLogger(name)
    logger.__class__ = InstrumentedLogger

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter('%(asctime)s.%(msecs)03d [%(levelname)s] %(message)s', datefmt='%H:%M:%S'))
        logger.addHandler(handler)
        level = os.environ.get('CADENCE_LOG_LEVEL', 'INFO').upper()
        logger.setLevel(getattr(logging, level, logging.INFO))

    return logger


# Create the main logger
logger = get_logger(
    name=paths.name_ns,
    version=__version__,
)
