"""
Parser for generate directive comments

Finds lines that start with the directive marker and turns each one into a
Directive record.

Syntax:
    <marker> <command> [arg ...]          runnable directive
    <marker> <name>=<command> [arg ...]   alias definition
    <marker> <name>= <command> [arg ...]  alias definition

Arguments follow the quoting rules of the tokenizer. The source is read in
a single top-to-bottom pass: an alias is visible to the directives below its
definition and never to the ones above it.

Example:
    >>> source = "//sourcegen:generate build=make -j4\\n//sourcegen:generate build extra"
    >>> [d.command_full() for d in DirectiveParser().parse(source) if d.runnable_is]
    ['make -j4 extra']
"""

import re
from typing import List, Optional, Tuple

from ..config.settings import appsettings
from ..models.directive import Directive
from .aliases import AliasRegistry
from .errors import DirectiveParseError, EmptyDirective
from .log import LOG
from .tokenizer import tokenize


ALIAS_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_.-]*)=(.*)$", re.DOTALL)


class DirectiveParser:
    """
    Parser for generate directive comments

    Handles:
    - Marker detection on left-trimmed lines
    - Quoted arguments
    - Alias definitions and expansion (per parse() call)
    - Error reporting with line/character positions
    """

    def __init__(self, marker: Optional[str] = None, specifier: Optional[str] = None):
        """
        Initialize parser

        Args:
            marker: Literal prefix of directive lines (default from settings)
            specifier: Module specifier attached to parse errors
        """
        self.marker = marker or appsettings.marker
        self.specifier = specifier

    def parse(self, source: str) -> List[Directive]:
        """
        Parse all directives in a module's source text

        Returns:
            Directives in source order, alias definitions included. Runnable
            directives carry alias-expanded command and args. A command that
            is only defined as an alias further down runs unexpanded.

        Raises:
            UnterminatedQuote: A directive has an unclosed quote
            EmptyDirective: A directive or alias definition names no command
        """
        registry = AliasRegistry()
        directives: List[Directive] = []

        for line_number, line in enumerate(source.split("\n"), start=1):
            if line.endswith("\r"):
                line = line[:-1]
            match = self.marker_find(line)
            if match is None:
                continue
            character, body = match

            try:
                directive = self.directive_build(line, line_number, character, body, registry)
            except DirectiveParseError as error:
                raise error.locate(self.specifier, line_number, character)

            if directive.alias_is:
                registry.define(directive.alias_name, directive.command, directive.args)
                LOG(f"Alias '{directive.alias_name}' defined at line {line_number}", level=3)

            directives.append(directive)

        return directives

    def marker_find(self, line: str) -> Optional[Tuple[int, str]]:
        """
        Check whether a line is a directive line

        The marker must be the first non-blank text on the line and be
        followed by whitespace or the end of the line.

        Returns:
            (1-based character of the marker, trimmed body) or None
        """
        stripped = line.lstrip()
        if not stripped.startswith(self.marker):
            return None
        rest = stripped[len(self.marker):]
        if rest and not rest[0].isspace():
            return None
        character = len(line) - len(stripped) + 1
        return character, rest.strip()

    def directive_build(
        self,
        line: str,
        line_number: int,
        character: int,
        body: str,
        registry: AliasRegistry,
    ) -> Directive:
        """
        Turn a directive body into a Directive

        Args:
            line: Full source line
            line_number: 1-based line number
            character: 1-based column of the marker
            body: Text after the marker, trimmed
            registry: Aliases defined above this line

        Returns:
            Directive (alias definition or alias-expanded runnable directive)
        """
        tokens = tokenize(body)
        if not tokens:
            raise EmptyDirective("directive has no command")

        alias_match = ALIAS_RE.match(tokens[0])
        if alias_match:
            name, command = alias_match.group(1), alias_match.group(2)
            rest = tokens[1:]
            if not command:
                if not rest:
                    raise EmptyDirective(f"alias '{name}' has no command")
                command, rest = rest[0], rest[1:]
            return Directive(
                line=line_number,
                character=character,
                original=line,
                command=command,
                args=rest,
                alias_name=name,
            )

        command, args, alias_used = registry.expand(tokens[0], tokens[1:])
        return Directive(
            line=line_number,
            character=character,
            original=line,
            command=command,
            args=args,
            alias_used=alias_used,
        )


def parse(source: str, marker: Optional[str] = None, specifier: Optional[str] = None) -> List[Directive]:
    """Parse directives with a one-off DirectiveParser"""
    return DirectiveParser(marker=marker, specifier=specifier).parse(source)
