"""
Centralized logging using Loguru with context-aware verbosity.

LOG() respects the verbosity of the RunState connected to the current
context, and tags every line with the module being processed, so lib
modules can log without passing state or specifiers around.

Usage:
    from sourcegen.lib.log import LOG, module_connect, state_connectToLogger

    state_connectToLogger(state)
    LOG("Filters compiled", level=3)

    with module_connect(module.specifier):
        LOG("3 directive(s)", level=2)   # tagged with the specifier
"""

import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Optional

from loguru import logger

# Context variables holding the current RunState and module specifier
_run_state: ContextVar[Optional[Any]] = ContextVar('run_state', default=None)
_module_specifier: ContextVar[str] = ContextVar('module_specifier', default='-')

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<magenta>{extra[specifier]}</magenta> │ "
    "<cyan>{function}</cyan>:<cyan>{line}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.configure(extra={"specifier": "-"})
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a RunState to the logging context.

    Args:
        state: RunState instance with verbosity attribute
    """
    _run_state.set(state)


@contextmanager
def module_connect(specifier: str) -> Iterator[None]:
    """Tag LOG() lines inside the block with a module specifier"""
    token = _module_specifier.set(specifier)
    try:
        yield
    finally:
        _module_specifier.reset(token)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata

    Verbosity 0 silences everything.
    """
    state = _run_state.get()

    if state and getattr(state, 'verbosity', 0) >= level:
        logger.bind(specifier=_module_specifier.get()).opt(depth=1).debug(message, **kwargs)
