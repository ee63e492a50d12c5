"""
Exception hierarchy for sourcegen

Every error can carry the module specifier and the directive position it
belongs to. Errors raised below the engine (tokenizer, parser) are created
without a location and get one attached by whoever knows it, via locate().
"""

from typing import Optional


class GenerateError(Exception):
    """
    Base class of all sourcegen errors

    Attributes:
        reason: Short description of the failure, without location
        specifier: Module specifier the error belongs to, if known
        line: 1-based line of the offending directive, if known
        character: 1-based character of the offending directive, if known
    """

    def __init__(
        self,
        reason: str,
        specifier: Optional[str] = None,
        line: Optional[int] = None,
        character: Optional[int] = None,
    ) -> None:
        self.reason = reason
        self.specifier = specifier
        self.line = line
        self.character = character
        super().__init__(reason)

    def locate(
        self,
        specifier: Optional[str] = None,
        line: Optional[int] = None,
        character: Optional[int] = None,
    ) -> "GenerateError":
        """Fill in location fields that are still unknown and return self"""
        if self.specifier is None:
            self.specifier = specifier
        if self.line is None:
            self.line = line
        if self.character is None:
            self.character = character
        return self

    def location_describe(self) -> str:
        """Render the location as <specifier>:<line>:<character>"""
        parts = []
        if self.specifier is not None:
            parts.append(self.specifier)
        if self.line is not None:
            parts.append(str(self.line))
            if self.character is not None:
                parts.append(str(self.character))
        return ":".join(parts)

    def __str__(self) -> str:
        location = self.location_describe()
        if location:
            return f"{location}: {self.reason}"
        return self.reason


class DirectiveParseError(GenerateError):
    """A directive comment could not be parsed; aborts the owning module"""


class UnterminatedQuote(DirectiveParseError):
    """A quote was opened in a directive but never closed"""

    def __init__(self, quote: str, **location) -> None:
        self.quote = quote
        super().__init__(f"unterminated {quote} string", **location)


class UnknownAlias(DirectiveParseError):
    """
    An alias name could not be resolved where it is referenced

    Directives have no separate alias reference syntax, so the parser never
    raises this for a plain command token: a command named like an alias
    defined further down simply runs unexpanded.
    """

    def __init__(self, name: str, **location) -> None:
        self.name = name
        super().__init__(f"alias '{name}' used before it is defined", **location)


class EmptyDirective(DirectiveParseError):
    """A directive (or alias definition) names no command"""


class InvalidPattern(GenerateError):
    """A glob or regular expression in the run options is malformed"""

    def __init__(self, kind: str, pattern: str, detail: str) -> None:
        self.kind = kind
        self.pattern = pattern
        super().__init__(f"invalid {kind} pattern {pattern!r}: {detail}")


class SpawnFailure(GenerateError):
    """The program named by a directive could not be launched"""

    def __init__(self, program: str, cause: OSError, **location) -> None:
        self.program = program
        self.cause = cause
        super().__init__(f"failed to run '{program}': {cause.strerror or cause}", **location)


class NonZeroExit(GenerateError):
    """The program named by a directive exited with a failing status"""

    def __init__(self, program: str, returncode: int, **location) -> None:
        self.program = program
        self.returncode = returncode
        super().__init__(f"'{program}' exited with status {returncode}", **location)
