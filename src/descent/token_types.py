"""
Token Types for the descent front end

Shared between lexer and parser to avoid circular dependencies.
"""

from typing import Any
from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types - mirrors grammar terminals"""

    # Literals
    INT = auto()
    FLOAT = auto()
    TRUE = auto()
    FALSE = auto()
    IDENT = auto()

    # Arithmetic
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()

    # Comparison
    EQ = auto()  # ==
    NEQ = auto()  # !=
    LT = auto()
    LTE = auto()  # <=
    GT = auto()
    GTE = auto()  # >=

    # Unary
    NEG = auto()  # !

    # Assignment
    ASSIGN = auto()  # =

    # Punctuation
    LPAR = auto()
    RPAR = auto()
    DOT = auto()
    COMMA = auto()
    COLON = auto()
    SEMI = auto()

    # Special
    NEWLINE = auto()
    BOF = auto()
    EOF = auto()
    BAD_CHAR = auto()
    BAD_NUMBER = auto()  # numeric literal out of range


# Single characters that map one-to-one onto a token type.
PUNCTUATION = {
    '(': TT.LPAR,
    ')': TT.RPAR,
    ',': TT.COMMA,
    ':': TT.COLON,
    ';': TT.SEMI,
    '.': TT.DOT,
    '+': TT.PLUS,
    '-': TT.MINUS,
    '*': TT.STAR,
    '/': TT.SLASH,
}

# Characters that may combine with a following '=': (alone, compound).
COMPARISON_PREFIXES = {
    '!': (TT.NEG, TT.NEQ),
    '=': (TT.ASSIGN, TT.EQ),
    '>': (TT.GT, TT.GTE),
    '<': (TT.LT, TT.LTE),
}

SPELLING = {tt: ch for ch, tt in PUNCTUATION.items()}
for _ch, (_single, _compound) in COMPARISON_PREFIXES.items():
    SPELLING[_single] = _ch
    SPELLING[_compound] = _ch + '='
SPELLING[TT.TRUE] = 'true'
SPELLING[TT.FALSE] = 'false'


@dataclass(frozen=True)
class Tok:
    """Token with position info.

    ``pos``/``length`` span the token inside the source the tokenizer was
    built from; ``line``/``column`` are 1-based and only used for messages.
    """

    type: TT
    value: Any
    pos: int = 0
    length: int = 0
    line: int = 1
    column: int = 1

    @property
    def end(self) -> int:
        return self.pos + self.length

    def describe(self) -> str:
        """Human readable form used in diagnostics."""
        if self.type == TT.EOF:
            return "end of input"
        if self.type == TT.BOF:
            return "start of input"
        if self.type == TT.NEWLINE:
            return "'\\n'"
        if self.type in SPELLING:
            return f"'{SPELLING[self.type]}'"
        return f"'{self.value}'"

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"
