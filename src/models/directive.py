"""
Directive and alias data models

Type-safe structures produced by the directive parser.
"""

import shlex
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Alias:
    """
    A named, reusable command template

    Defined by a directive of the form `name=command arg ...` and expanded
    when a later directive in the same module uses `name` as its command.

    Attributes:
        name: Alias name
        command: Program the alias runs
        args: Arguments placed before the using directive's own arguments
    """
    name: str
    command: str
    args: List[str] = field(default_factory=list)


@dataclass
class Directive:
    """
    One parsed occurrence of the generate comment

    A directive either defines an alias (alias_name is set) or is runnable.
    For runnable directives, command and args are already alias-expanded.

    Attributes:
        line: 1-based line of the marker
        character: 1-based column of the marker's first character
        original: Full source line, used by the run/skip regex filter
        command: Program to run (or the alias' program for definitions)
        args: Arguments, alias arguments first
        alias_name: Name being defined, for alias definitions
        alias_used: Name of the alias expanded into this directive, if any

    Example:
        For source "  //sourcegen:generate build=make -j4" at line 3:
        Directive(line=3, character=3, original="  //sourcegen:generate build=make -j4",
                  command="make", args=["-j4"], alias_name="build")
    """
    line: int
    character: int
    original: str
    command: str
    args: List[str] = field(default_factory=list)
    alias_name: Optional[str] = None
    alias_used: Optional[str] = None

    @property
    def alias_is(self) -> bool:
        return self.alias_name is not None

    @property
    def runnable_is(self) -> bool:
        return self.alias_name is None

    def command_full(self) -> str:
        """Render the command line for display, quoted for a POSIX shell"""
        return shlex.join([self.command, *self.args])
