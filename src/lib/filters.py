"""
Module and directive filters

Two independent predicates, both built once from GenerateOptions:

- PathFilter decides which modules are scanned at all (glob include/ignore)
- DirectiveFilter decides which runnable directives of a scanned module are
  executed (regex run/skip, matched against the directive's source line)

Malformed patterns raise InvalidPattern when the filters are built, before
any module is looked at.
"""

import re
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Optional, Pattern, Tuple

from ..models.directive import Directive
from ..models.options import GenerateOptions
from .errors import InvalidPattern


@dataclass(frozen=True)
class PathFilter:
    """
    Compiled include/ignore globs

    Attributes:
        include: Globs a path must match one of (empty matches everything)
        ignore: Globs that reject a path
    """
    include: Tuple[str, ...] = ()
    ignore: Tuple[str, ...] = ()

    @classmethod
    def options_compile(cls, options: GenerateOptions) -> "PathFilter":
        """Validate the option globs and build the filter"""
        for glob in (*options.include, *options.ignore):
            glob_validate(glob)
        return cls(include=tuple(options.include), ignore=tuple(options.ignore))


@dataclass(frozen=True)
class DirectiveFilter:
    """
    Compiled run/skip regexes

    Attributes:
        run: Directive lines must match this to run (None = no constraint)
        skip: Directive lines matching this are skipped (None = no constraint)
    """
    run: Optional[Pattern[str]] = None
    skip: Optional[Pattern[str]] = None

    @classmethod
    def options_compile(cls, options: GenerateOptions) -> "DirectiveFilter":
        """Compile the option regexes and build the filter"""
        return cls(run=regex_compile(options.run), skip=regex_compile(options.skip))


def glob_validate(glob: str) -> None:
    """
    Reject globs fnmatch would silently accept but that are malformed

    Raises:
        InvalidPattern: Empty glob, unclosed '[' or a run of three '*'
    """
    if not glob:
        raise InvalidPattern("glob", glob, "pattern is empty")
    if "***" in glob:
        raise InvalidPattern("glob", glob, "wildcards are either '*' or '**'")

    position = 0
    while position < len(glob):
        if glob[position] == "[":
            # ']' right after '[' or '[!' is a literal member of the class
            close = position + 1
            if close < len(glob) and glob[close] == "!":
                close += 1
            if close < len(glob) and glob[close] == "]":
                close += 1
            close = glob.find("]", close)
            if close == -1:
                raise InvalidPattern("glob", glob, f"unclosed '[' at index {position}")
            position = close
        position += 1


def regex_compile(pattern: Optional[str]) -> Optional[Pattern[str]]:
    """
    Compile an optional regex

    Raises:
        InvalidPattern: If the regex does not compile
    """
    if pattern is None:
        return None
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidPattern("regex", pattern, str(e)) from e


def glob_match(glob: str, path: str) -> bool:
    """
    Match a glob against a POSIX path

    The whole path is matched, with '*' allowed to cross '/'. Globs without
    a '/' are also tried against the last path component.
    """
    if fnmatchcase(path, glob):
        return True
    if "/" not in glob:
        return fnmatchcase(path.rsplit("/", 1)[-1], glob)
    return False


def path_accept(path_filter: PathFilter, path: str) -> bool:
    """
    Check whether a module path participates in the run

    Args:
        path_filter: Compiled include/ignore globs
        path: Module path (POSIX form) or non-file specifier

    Returns:
        True if the path matches no ignore glob and either include is empty
        or the path matches some include glob
    """
    if any(glob_match(glob, path) for glob in path_filter.ignore):
        return False
    if not path_filter.include:
        return True
    return any(glob_match(glob, path) for glob in path_filter.include)


def directive_accept(directive_filter: DirectiveFilter, directive: Directive) -> bool:
    """
    Check whether a runnable directive is executed

    Args:
        directive_filter: Compiled run/skip regexes
        directive: Parsed directive; its original line is searched

    Returns:
        True if run is absent or searches the line, and skip is absent or
        does not search the line
    """
    if directive_filter.run is not None and not directive_filter.run.search(directive.original):
        return False
    if directive_filter.skip is not None and directive_filter.skip.search(directive.original):
        return False
    return True
