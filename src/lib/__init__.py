"""
sourcegen - run code-generation commands embedded in source comments
"""

__version__ = "1.0.0"

from .errors import (
    GenerateError,
    DirectiveParseError,
    UnterminatedQuote,
    UnknownAlias,
    EmptyDirective,
    InvalidPattern,
    SpawnFailure,
    NonZeroExit,
)
from .tokenizer import tokenize
from .aliases import AliasRegistry
from .parser import DirectiveParser, parse
from .filters import PathFilter, DirectiveFilter, path_accept, directive_accept
from .engine import Engine
from .generate import generate
from .log import LOG, module_connect, state_connectToLogger

__all__ = [
    "GenerateError",
    "DirectiveParseError",
    "UnterminatedQuote",
    "UnknownAlias",
    "EmptyDirective",
    "InvalidPattern",
    "SpawnFailure",
    "NonZeroExit",
    "tokenize",
    "AliasRegistry",
    "DirectiveParser",
    "parse",
    "PathFilter",
    "DirectiveFilter",
    "path_accept",
    "directive_accept",
    "Engine",
    "generate",
    "LOG",
    "state_connectToLogger",
    "module_connect",
    "__version__",
]
