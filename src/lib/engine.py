"""
Execution engine for generate directives

Turns the directives of one module into processes, one at a time, in
source order.
"""

import subprocess
import sys
from typing import Any, Callable, Dict, List, Optional, TextIO

from ..config.settings import AppSettings, FailurePolicy, appsettings
from ..models.directive import Directive
from ..models.invocation import CommandInvocation, DirectiveResult
from ..models.module import Module
from ..models.options import GenerateOptions
from .environment import directiveEnv_derive, env_merge
from .errors import NonZeroExit, SpawnFailure
from .filters import DirectiveFilter, directive_accept
from .log import LOG
from .parser import DirectiveParser


class Engine:
    """
    Runs the generate directives of modules

    Responsibilities:
    - Parse a module's directives (fresh aliases per module)
    - Apply the run/skip directive filter
    - Build the command invocation and its environment
    - Spawn each process and wait for it
    - Relay captured output to the output channel
    - Apply the failure policies
    """

    def __init__(
        self,
        options: Optional[GenerateOptions] = None,
        settings: Optional[AppSettings] = None,
        output: Optional[TextIO] = None,
        base_env: Optional[Dict[str, str]] = None,
        runner: Optional[Callable[..., Any]] = None,
        directive_filter: Optional[DirectiveFilter] = None,
    ) -> None:
        """
        Initialize engine

        Args:
            options: Filters and execution flags (default: GenerateOptions())
            settings: Application settings (default: appsettings)
            output: Stream for progress and process output (default: sys.stdout)
            base_env: Inherited environment (default: os.environ)
            runner: Stand-in for subprocess.run, same signature
            directive_filter: Pre-compiled run/skip filter (compiled from options if None)
        """
        self.options = options if options is not None else GenerateOptions()
        self.settings = settings or appsettings
        self.output = output if output is not None else sys.stdout
        self.base_env = base_env
        self.runner = runner or subprocess.run
        self.directive_filter = directive_filter or DirectiveFilter.options_compile(self.options)
        self.directives_filtered = 0

    def module_run(self, module: Module) -> List[DirectiveResult]:
        """
        Run all accepted directives of one module

        Args:
            module: Module to scan

        Returns:
            One result per runnable directive that passed the filter

        Raises:
            DirectiveParseError: Source could not be parsed; nothing was run
            SpawnFailure: A program could not be launched and the policy is ABORT
            NonZeroExit: A program failed and the policy is ABORT
        """
        parser = DirectiveParser(marker=self.settings.marker, specifier=module.specifier)
        directives = parser.parse(module.source_text)
        LOG(f"{module.specifier}: {len(directives)} directive(s)", level=2)

        results: List[DirectiveResult] = []
        for directive in directives:
            if directive.alias_is:
                continue
            if not directive_accept(self.directive_filter, directive):
                self.directives_filtered += 1
                LOG(f"Skipping line {directive.line}: {directive.original.strip()}", level=2)
                continue
            results.append(self.directive_run(module, directive))
        return results

    def invocation_build(self, module: Module, directive: Directive) -> CommandInvocation:
        """
        Resolve a runnable directive into a command invocation

        Args:
            module: Owning module (source of the derived environment)
            directive: Alias-expanded runnable directive

        Returns:
            CommandInvocation with the merged environment
        """
        derived = directiveEnv_derive(module, directive, self.settings)
        LOG(f"Derived environment: {derived}", level=3)
        return CommandInvocation(
            program=directive.command,
            args=list(directive.args),
            env=env_merge(derived, self.base_env),
        )

    def directive_run(self, module: Module, directive: Directive) -> DirectiveResult:
        """
        Run one directive and report on the output channel

        Raises:
            SpawnFailure: If launching failed and on_spawn_failure is ABORT
            NonZeroExit: If the exit status is non-zero and on_nonzero_exit is ABORT
        """
        invocation = self.invocation_build(module, directive)
        result = DirectiveResult(
            specifier=module.specifier,
            directive=directive,
            invocation=invocation,
        )

        if self.options.verbose:
            self.line_write(f"Running {invocation.command_full()} in <{module.specifier}>")

        if self.options.dry_run:
            result.skipped = True
            return result

        self.invocation_execute(invocation, result)

        if result.error is not None:
            LOG(f"{result.error}", level=1)
            if self.policy_for(result.error) is FailurePolicy.ABORT:
                raise result.error
        return result

    def invocation_execute(self, invocation: CommandInvocation, result: DirectiveResult) -> None:
        """
        Spawn the process, wait for it, and fill in the result

        Output is captured to completion, then written to the output
        channel. Launch failures are recorded as SpawnFailure.
        """
        location = {
            "specifier": result.specifier,
            "line": result.directive.line,
            "character": result.directive.character,
        }
        try:
            completed = self.runner(
                invocation.argv,
                env=invocation.env,
                capture_output=True,
                check=False,
            )
        except OSError as e:
            result.error = SpawnFailure(invocation.program, e, **location)
            self.line_write(f"error: {result.error}")
            return

        result.returncode = completed.returncode
        result.stdout = self.text_decode(completed.stdout)
        result.stderr = self.text_decode(completed.stderr)

        self.line_write(f"stdout: {result.stdout}")
        self.line_write(f"stderr: {result.stderr}")

        if self.options.trace:
            self.line_write(f"exit status {completed.returncode}")

        if completed.returncode != 0:
            result.error = NonZeroExit(invocation.program, completed.returncode, **location)

    def policy_for(self, error: Exception) -> FailurePolicy:
        """Failure policy for an error; options win over settings"""
        if isinstance(error, SpawnFailure):
            policy = self.options.on_spawn_failure
            return policy if policy is not None else self.settings.on_spawn_failure
        policy = self.options.on_nonzero_exit
        return policy if policy is not None else self.settings.on_nonzero_exit

    def text_decode(self, data: Any) -> str:
        if data is None:
            return ""
        if isinstance(data, str):
            return data
        return data.decode("utf-8", errors=self.settings.output_encoding_errors)

    def line_write(self, text: str) -> None:
        self.output.write(f"{text}\n")
        self.output.flush()
