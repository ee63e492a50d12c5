"""
sourcegen - run code-generation commands embedded in source comments

Scans modules for `//sourcegen:generate` directive comments and runs the
commands they name, one at a time, in source order.
"""

__version__ = "1.0.0"

from .lib import (
    generate,
    tokenize,
    parse,
    DirectiveParser,
    AliasRegistry,
    Engine,
    GenerateError,
    DirectiveParseError,
    UnterminatedQuote,
    UnknownAlias,
    EmptyDirective,
    InvalidPattern,
    SpawnFailure,
    NonZeroExit,
    LOG,
    state_connectToLogger,
)
from .models import Module, Directive, GenerateOptions, RunReport
from .config import FailurePolicy

__all__ = [
    "generate",
    "tokenize",
    "parse",
    "DirectiveParser",
    "AliasRegistry",
    "Engine",
    "GenerateError",
    "DirectiveParseError",
    "UnterminatedQuote",
    "UnknownAlias",
    "EmptyDirective",
    "InvalidPattern",
    "SpawnFailure",
    "NonZeroExit",
    "LOG",
    "state_connectToLogger",
    "Module",
    "Directive",
    "GenerateOptions",
    "RunReport",
    "FailurePolicy",
    "__version__",
]
