"""
Run state model and pipeline helper

Defines the RunState dataclass for the functional pipeline pattern and the
pipeline() helper for composing transformation stages.
"""

import sys
from dataclasses import dataclass, field
from functools import reduce
from typing import Any, Callable, Dict, List, Optional, TextIO, TypeVar

from ..config.settings import AppSettings, appsettings
from .invocation import RunReport
from .module import Module
from .options import GenerateOptions


RS = TypeVar("RS", bound="RunState")


@dataclass
class RunState:
    """
    Central state container for a generate run (state bus pattern).

    Carries everything through the pipeline, with each stage adding fields
    as the run progresses.

    Pipeline stages and their state additions:
        - Initial: modules, options, settings, output, base_env, runner, verbosity
        - options_check: pathFilter, directiveFilter
        - modules_select: selectedModules, report.modules_scanned/modules_skipped
        - directives_run: report.results, report.parse_errors
        - results_report: (no additions, terminal stage)

    Attributes:
        modules: Ordered modules handed over by the caller
        options: Filters and execution flags
        settings: Application settings (marker, env prefix)
        output: Stream receiving human-readable progress lines
        base_env: Inherited environment, None means os.environ
        runner: Replacement for subprocess.run, None means subprocess.run
        verbosity: LOG() verbosity level
        pathFilter: Compiled include/ignore filter
        directiveFilter: Compiled run/skip filter
        selectedModules: Modules that passed the path filter
        report: Accumulated results
    """

    modules: List[Module] = field(default_factory=list)
    options: GenerateOptions = field(default_factory=GenerateOptions)
    settings: AppSettings = field(default_factory=lambda: appsettings)
    output: TextIO = field(default_factory=lambda: sys.stdout)
    base_env: Optional[Dict[str, str]] = field(default=None)
    runner: Optional[Callable[..., Any]] = field(default=None)
    verbosity: int = field(default_factory=lambda: appsettings.verbosity)

    # Pipeline state
    pathFilter: Optional[Any] = field(default=None)  # PathFilter at runtime
    directiveFilter: Optional[Any] = field(default=None)  # DirectiveFilter at runtime
    selectedModules: List[Module] = field(default_factory=list)
    report: RunReport = field(default_factory=RunReport)

    def copy(self: RS) -> RS:
        """
        Creates a shallow copy of the RunState instance.

        Returns:
            A new RunState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: RunState, *stages: Callable[[RunState], RunState]
) -> RunState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (RunState) -> RunState that receives the
    output of the previous stage and returns a new state.

    Args:
        initial_state: Starting RunState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final RunState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            options_check,
            modules_select,
            directives_run,
            results_report
        )

    This is equivalent to:
        results_report(directives_run(modules_select(options_check(initial_state))))
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
