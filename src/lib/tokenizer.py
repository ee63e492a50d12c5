"""
Shell-like splitting of directive arguments

Splits on whitespace unless the whitespace is inside a '...' or "..."
segment. There is no escape processing: a quoted segment runs verbatim up
to the next occurrence of its own quote character, and a quote character
that does not start a token is ordinary text.

Example:
    >>> tokenize("go run 'gen tool.go' -out=\"a b\"")
    ['go', 'run', 'gen tool.go', '-out="a', 'b"']
"""

from typing import List

from .errors import UnterminatedQuote


SPACE_CHARS = " \t\n\r"
QUOTE_CHARS = "'\""


def space_is(char: str) -> bool:
    """Check if a character separates tokens"""
    return char in SPACE_CHARS


def tokenize(source: str) -> List[str]:
    """
    Split a directive body into tokens

    Args:
        source: Text following the directive marker

    Returns:
        Tokens in order, with surrounding quotes stripped. Adjacent quoted
        segments are separate tokens: 'a '"b " gives ["a ", "b "].

    Raises:
        UnterminatedQuote: If a quoted segment has no closing quote
    """
    tokens: List[str] = []
    position = 0
    length = len(source)

    while position < length:
        while position < length and space_is(source[position]):
            position += 1
        if position >= length:
            break

        char = source[position]
        if char in QUOTE_CHARS:
            close = source.find(char, position + 1)
            if close == -1:
                raise UnterminatedQuote(char)
            tokens.append(source[position + 1:close])
            position = close + 1
            continue

        end = position
        while end < length and not space_is(source[end]):
            end += 1
        tokens.append(source[position:end])
        position = end

    return tokens


def quote(token: str) -> str:
    """
    Render a token so that tokenize() gives it back unchanged

    Plain tokens are returned as they are. Tokens that are empty, contain
    whitespace or start with a quote are wrapped in whichever quote they do
    not contain.

    Raises:
        ValueError: If the token needs quoting but contains both quote characters
    """
    if token and not token.startswith(tuple(QUOTE_CHARS)) and not any(space_is(c) for c in token):
        return token
    for char in QUOTE_CHARS:
        if char not in token:
            return f"{char}{token}{char}"
    raise ValueError(f"token cannot be quoted: {token!r}")


def tokens_join(tokens: List[str]) -> str:
    """Join tokens into a single string that tokenize() splits back into them"""
    return " ".join(quote(token) for token in tokens)
