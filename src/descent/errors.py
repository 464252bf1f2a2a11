from __future__ import annotations

from typing import Optional

from .token_types import Tok


class ParseError(Exception):
    """Structured parse failure.

    Carries the offending token and the token consumed before it so the
    top-level catch point can point at the exact span in the source.
    """

    title = "Syntax error"

    def __init__(self, message: str, token: Tok, previous: Optional[Tok] = None,
                 continuation: Optional[str] = None, title: Optional[str] = None):
        if title is not None:
            self.title = title
        self.message = message
        self.token = token
        self.previous = previous
        self.continuation = continuation
        super().__init__(
            f"{self.title}: {message} at line {token.line}, col {token.column}"
        )

    @property
    def pos(self) -> int:
        return self.token.pos

    @property
    def line(self) -> int:
        return self.token.line

    @property
    def column(self) -> int:
        return self.token.column


class MalformedCharacterError(ParseError):
    title = "Malformed character"


class UnbalancedParenthesisError(ParseError):
    title = "Unbalanced parenthesis"


class MissingValueError(ParseError):
    title = "Missing value"


class UnparenthesizedUnaryError(ParseError):
    title = "Invalid syntax"


class MissingEndOfStatementError(ParseError):
    title = "Missing end of statement"


class MalformedDeclarationError(ParseError):
    title = "Malformed declaration"


class NumberOutOfRangeError(ParseError):
    title = "Number out of range"
