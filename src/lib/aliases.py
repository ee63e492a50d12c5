"""
Alias registry for generate directives

Maps alias names to Alias templates for the duration of one module scan.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from ..models.directive import Alias


class AliasRegistry:
    """
    Registry of aliases defined so far in one module

    A fresh registry is created for each module, so aliases never leak from
    one module into another. Redefining a name replaces the earlier alias.
    """

    def __init__(self) -> None:
        """Initialize an empty registry"""
        self.aliases: Dict[str, Alias] = {}

    def define(self, name: str, command: str, args: Sequence[str] = ()) -> Alias:
        """Register (or replace) an alias and return it"""
        alias = Alias(name=name, command=command, args=list(args))
        self.aliases[name] = alias
        return alias

    def resolve(self, name: str) -> Optional[Alias]:
        """
        Look up an alias by exact name

        Args:
            name: Command token of a directive

        Returns:
            The Alias, or None if no alias of that name is defined
        """
        return self.aliases.get(name)

    def expand(
        self, command: str, args: Sequence[str]
    ) -> Tuple[str, List[str], Optional[str]]:
        """
        Expand a directive's command through the registry

        The alias' own command is never looked up again, so aliases do not
        chain.

        Args:
            command: Directive command token
            args: Directive arguments

        Returns:
            (command, args, alias name used or None). Alias arguments come
            first, followed by the directive's own arguments.

        Example:
            With alias cmd=echo hi:
            expand("cmd", ["there"]) -> ("echo", ["hi", "there"], "cmd")
        """
        alias = self.resolve(command)
        if alias is None:
            return command, list(args), None
        return alias.command, [*alias.args, *args], alias.name

    def __contains__(self, name: object) -> bool:
        return name in self.aliases

    def __len__(self) -> int:
        return len(self.aliases)
