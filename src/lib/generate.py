"""
Generate run pipeline

Public entry point of sourcegen. A run is a functional pipeline over
RunState:

    options_check -> modules_select -> directives_run -> results_report

Modules are processed strictly in the order given, and the directives of a
module in source order; nothing runs concurrently.

Usage:
    from sourcegen import generate, GenerateOptions, Module

    report = generate(
        [Module.file_read("src/schema.ts")],
        GenerateOptions(ignore=("*.test.*",), verbose=True),
    )
"""

from typing import Any, Callable, Dict, Iterable, Optional, TextIO

from ..config.settings import AppSettings
from ..models.invocation import RunReport
from ..models.module import Module
from ..models.options import GenerateOptions
from ..models.state import RunState, pipeline
from .engine import Engine
from .errors import DirectiveParseError
from .filters import DirectiveFilter, PathFilter, path_accept
from .log import LOG, module_connect, state_connectToLogger


def options_check(inputstate: RunState) -> RunState:
    """
    Compile the include/ignore globs and run/skip regexes

    Returns:
        RunState with pathFilter and directiveFilter set

    Raises:
        InvalidPattern: Before any module is scanned
    """
    state = inputstate.copy()
    state.pathFilter = PathFilter.options_compile(state.options)
    state.directiveFilter = DirectiveFilter.options_compile(state.options)
    LOG("Filters compiled", level=3)
    return state


def modules_select(inputstate: RunState) -> RunState:
    """
    Apply the path filter to the module sequence

    Returns:
        RunState with selectedModules set, order preserved
    """
    state = inputstate.copy()
    selected = []
    for module in state.modules:
        if path_accept(state.pathFilter, module.filterPath_get()):
            selected.append(module)
            state.report.modules_scanned.append(module.specifier)
        else:
            state.report.modules_skipped.append(module.specifier)
            LOG(f"Ignoring module {module.specifier}", level=2)
    state.selectedModules = selected
    LOG(f"{len(selected)} of {len(state.modules)} module(s) selected", level=2)
    return state


def directives_run(inputstate: RunState) -> RunState:
    """
    Parse and run the directives of every selected module

    A parse error aborts only its own module; it is recorded on the report
    and the run moves on to the next module. Runtime failures follow the
    options' failure policies inside the engine.

    Returns:
        RunState with report.results and report.parse_errors filled in
    """
    state = inputstate.copy()
    engine = Engine(
        options=state.options,
        settings=state.settings,
        output=state.output,
        base_env=state.base_env,
        runner=state.runner,
        directive_filter=state.directiveFilter,
    )

    for module in state.selectedModules:
        with module_connect(module.specifier):
            try:
                state.report.results.extend(engine.module_run(module))
            except DirectiveParseError as error:
                state.report.parse_errors.append(error)
                state.output.write(f"error: {error}\n")
                LOG(f"Parse error, module skipped: {error.reason}", level=1)

    state.report.directives_filtered = engine.directives_filtered
    return state


def results_report(inputstate: RunState) -> RunState:
    """
    Log a summary of the run

    Returns:
        RunState unchanged (terminal pipeline stage)
    """
    state = inputstate.copy()
    report = state.report
    ran = [result for result in report.results if not result.skipped]
    LOG(
        f"{len(report.modules_scanned)} module(s) scanned, "
        f"{len(ran)} command(s) run, "
        f"{len(report.failures)} failed, "
        f"{len(report.parse_errors)} parse error(s)",
        level=2,
    )
    return state


def generate(
    modules: Iterable[Module],
    options: Optional[GenerateOptions] = None,
    output: Optional[TextIO] = None,
    base_env: Optional[Dict[str, str]] = None,
    settings: Optional[AppSettings] = None,
    runner: Optional[Callable[..., Any]] = None,
    verbosity: Optional[int] = None,
) -> RunReport:
    """
    Run the generate directives found in a sequence of modules

    Args:
        modules: Modules in processing order
        options: Filters and execution flags (defaults: everything, quiet)
        output: Stream for progress and process output (default: sys.stdout)
        base_env: Inherited environment (default: os.environ)
        settings: Application settings (default: appsettings)
        runner: Stand-in for subprocess.run
        verbosity: LOG() verbosity (default from settings)

    Returns:
        RunReport describing every directive that was considered for running

    Raises:
        InvalidPattern: A glob or regex in options is malformed
        SpawnFailure: A program could not be launched under the ABORT policy
        NonZeroExit: A program failed under the ABORT policy
    """
    state = RunState(modules=list(modules))
    if options is not None:
        state.options = options
    if output is not None:
        state.output = output
    if settings is not None:
        state.settings = settings
        state.verbosity = settings.verbosity
    if verbosity is not None:
        state.verbosity = verbosity
    state.base_env = base_env
    state.runner = runner

    # Connect state to logger for the entire run
    state_connectToLogger(state)

    final = pipeline(state, options_check, modules_select, directives_run, results_report)
    return final.report
