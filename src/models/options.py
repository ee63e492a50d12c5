"""
Run options model

GenerateOptions is built once per invocation by the caller (typically a CLI
layer) and never changed afterwards.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from ..config.settings import FailurePolicy


@dataclass(frozen=True)
class GenerateOptions:
    """
    Filters and execution flags for one run

    Attributes:
        include: Globs a module path must match one of (empty = all)
        ignore: Globs that exclude a module path
        run: Regex a directive line must match to be executed
        skip: Regex that excludes a directive line
        verbose: Print each command before running it
        dry_run: Do not spawn any process
        trace: Print the exit status of each process
        on_spawn_failure: Policy when a program cannot be launched
            (None: AppSettings.on_spawn_failure of the running engine)
        on_nonzero_exit: Policy when a program exits with a failing status
            (None: AppSettings.on_nonzero_exit of the running engine)
    """
    include: Tuple[str, ...] = ()
    ignore: Tuple[str, ...] = ()
    run: Optional[str] = None
    skip: Optional[str] = None
    verbose: bool = False
    dry_run: bool = False
    trace: bool = False
    on_spawn_failure: Optional[FailurePolicy] = None
    on_nonzero_exit: Optional[FailurePolicy] = None

    def __post_init__(self) -> None:
        # Accept any iterable of globs but store tuples
        object.__setattr__(self, "include", _globs_freeze(self.include))
        object.__setattr__(self, "ignore", _globs_freeze(self.ignore))
        if self.on_spawn_failure is not None:
            object.__setattr__(self, "on_spawn_failure", FailurePolicy(self.on_spawn_failure))
        if self.on_nonzero_exit is not None:
            object.__setattr__(self, "on_nonzero_exit", FailurePolicy(self.on_nonzero_exit))


def _globs_freeze(globs: Iterable[str]) -> Tuple[str, ...]:
    if isinstance(globs, str):
        return (globs,)
    return tuple(str(glob) for glob in globs)
