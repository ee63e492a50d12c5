"""
Execution data models

Structures describing what the engine runs and what came back.
"""

import shlex
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..lib.errors import DirectiveParseError, GenerateError
from .directive import Directive


@dataclass(frozen=True)
class CommandInvocation:
    """
    Fully resolved command, ready to spawn

    Attributes:
        program: Executable name or path
        args: Arguments after the program
        env: Complete environment of the child process
    """
    program: str
    args: List[str]
    env: Dict[str, str]

    @property
    def argv(self) -> List[str]:
        return [self.program, *self.args]

    def command_full(self) -> str:
        return shlex.join(self.argv)


@dataclass
class DirectiveResult:
    """
    Outcome of one runnable directive

    Attributes:
        specifier: Owning module
        directive: The parsed directive
        invocation: What was (or would have been) run
        returncode: Exit status, None if no process ran
        stdout: Captured standard output
        stderr: Captured standard error
        error: SpawnFailure or NonZeroExit, if any
        skipped: True for dry runs
    """
    specifier: str
    directive: Directive
    invocation: CommandInvocation
    returncode: Optional[int] = None
    stdout: str = ""
    stderr: str = ""
    error: Optional[GenerateError] = None
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and (self.returncode is None or self.returncode == 0)


@dataclass
class RunReport:
    """
    Summary of a whole run

    Attributes:
        results: One entry per runnable directive that passed the filters, in run order
        parse_errors: Modules whose directives could not be parsed
        modules_scanned: Specifiers of modules that passed the path filter
        modules_skipped: Specifiers of modules rejected by the path filter
        directives_filtered: Number of runnable directives rejected by run/skip
    """
    results: List[DirectiveResult] = field(default_factory=list)
    parse_errors: List[DirectiveParseError] = field(default_factory=list)
    modules_scanned: List[str] = field(default_factory=list)
    modules_skipped: List[str] = field(default_factory=list)
    directives_filtered: int = 0

    @property
    def failures(self) -> List[DirectiveResult]:
        return [result for result in self.results if not result.ok]

    @property
    def ok(self) -> bool:
        return not self.parse_errors and not self.failures
