"""
Lexer for descent - Recursive Descent Parser

Turns a single statement of source text into a pull-based token stream.

Features:
- Scanner: bounds-checked cursor over the source, no token knowledge
- Tokenizer: one token per call, persistent EOF once the input is exhausted
- Longest match for the compound comparisons (!= == >= <=)
- Integer / decimal / exponent number literals
- Malformed characters and out-of-range numbers become BAD_CHAR / BAD_NUMBER
  tokens instead of raising
"""

import math
from typing import Iterator, List

from .token_types import TT, Tok, PUNCTUATION, COMPARISON_PREFIXES

WHITESPACE = (' ', '\t', '\r')

# Integer literals stay below CPython's int/str conversion limit (4300).
MAX_INT_DIGITS = 4000
MAX_EXPONENT_DIGITS = 6


def is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def is_ident_start(ch: str) -> bool:
    return ch == '_' or 'a' <= ch <= 'z' or 'A' <= ch <= 'Z'


def is_ident_char(ch: str) -> bool:
    return is_ident_start(ch) or is_digit(ch)


# ============================================================================
# Scanner
# ============================================================================

class Scanner:
    """
    Read-only cursor over the source text.

    INVARIANT: 0 <= position <= end. Probing past the validated bounds is a
    programmer error and fails an assertion; callers check at_end() first.
    """

    def __init__(self, source: str):
        self.source = source
        self.position = 0
        self.end = len(source)

    def at_end(self, offset: int = 0) -> bool:
        """True iff position + offset has reached the end of the source"""
        assert self.position + offset <= self.end, \
            f"at_end({offset}) probes past end ({self.position} of {self.end})"
        return self.position + offset >= self.end

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character without consuming it"""
        assert self.position + offset < self.end, \
            f"peek({offset}) reads past end ({self.position} of {self.end})"
        return self.source[self.position + offset]

    def advance(self, offset: int = 1) -> None:
        """Move the cursor forward by offset characters"""
        assert self.position + offset <= self.end, \
            f"advance({offset}) moves past end ({self.position} of {self.end})"
        self.position += offset

    def next(self) -> str:
        """Consume and return the current character"""
        ch = self.peek()
        self.position += 1
        return ch


# ============================================================================
# Tokenizer
# ============================================================================

class Tokenizer:
    """
    Lazy, non-restartable token stream over one statement.

    Each next_token() call consumes input and returns exactly one token.
    Once EOF has been produced every further call returns EOF again.
    """

    def __init__(self, source: str):
        self.source = source
        self.scanner = Scanner(source)
        self.line = 1
        self.line_start = 0

    def __iter__(self) -> Iterator[Tok]:
        """Yield tokens up to and including the first EOF"""
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == TT.EOF:
                return

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def next_token(self) -> Tok:
        """Scan next token"""
        scanner = self.scanner

        while not scanner.at_end():
            start = scanner.position
            ch = scanner.next()

            if ch in WHITESPACE:
                continue

            if ch == '\n':
                tok = self.emit(TT.NEWLINE, ch, start)
                self.line += 1
                self.line_start = scanner.position
                return tok

            if ch in PUNCTUATION:
                return self.emit(PUNCTUATION[ch], ch, start)

            if ch in COMPARISON_PREFIXES:
                single, compound = COMPARISON_PREFIXES[ch]
                if self.consume('='):
                    return self.emit(compound, ch + '=', start)
                return self.emit(single, ch, start)

            if is_digit(ch):
                return self.scan_number(start)

            if is_ident_start(ch):
                return self.scan_identifier(start)

            return self.emit(TT.BAD_CHAR, ch, start)

        return self.emit(TT.EOF, None, scanner.end)

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_number(self, start: int) -> Tok:
        """
        Scan number literal; the first digit is already consumed.

        No fractional part and no negative exponent keeps the literal an
        integer (2E3 -> 2000); anything else promotes it to a float.
        """
        integer = self.source[start] + self.consume_digits()
        fraction = None
        exponent = ''
        sign = ''

        # Decimal part
        if self.consume('.'):
            fraction = self.consume_digits()

        # Scientific notation
        if self.consume('E') or self.consume('e'):
            if self.consume('+'):
                sign = '+'
            elif self.consume('-'):
                sign = '-'
            exponent = self.consume_digits()

        if len(exponent.lstrip('0')) > MAX_EXPONENT_DIGITS:
            return self.out_of_range(start)
        power = int(exponent.lstrip('0') or '0')

        if fraction is None and sign != '-':
            significant = integer.lstrip('0')
            if significant and len(significant) + power > MAX_INT_DIGITS:
                return self.out_of_range(start)
            value = int(significant) * 10 ** power if significant else 0
            return self.emit(TT.INT, value, start)

        mantissa = f"{integer}.{fraction or '0'}"
        value = float(f"{mantissa}e{sign}{power}")
        if math.isinf(value):
            return self.out_of_range(start)
        return self.emit(TT.FLOAT, value, start)

    def out_of_range(self, start: int) -> Tok:
        """Numeric literal the AST cannot hold; the parser reports it"""
        return self.emit(TT.BAD_NUMBER, self.source[start:self.scanner.position], start)

    def scan_identifier(self, start: int) -> Tok:
        """Scan identifier or boolean; the first character is already consumed"""
        while not self.scanner.at_end() and is_ident_char(self.scanner.peek()):
            self.scanner.advance()

        text = self.source[start:self.scanner.position]
        if text == 'true':
            return self.emit(TT.TRUE, True, start)
        if text == 'false':
            return self.emit(TT.FALSE, False, start)
        return self.emit(TT.IDENT, text, start)

    # ========================================================================
    # Utilities
    # ========================================================================

    def consume(self, match: str) -> bool:
        """Consume the current character if it equals match"""
        if not self.scanner.at_end() and self.scanner.peek() == match:
            self.scanner.advance()
            return True
        return False

    def consume_digits(self) -> str:
        """Consume a (possibly empty) run of digits"""
        start = self.scanner.position
        while not self.scanner.at_end() and is_digit(self.scanner.peek()):
            self.scanner.advance()
        return self.source[start:self.scanner.position]

    def emit(self, token_type: TT, value, start: int) -> Tok:
        """Build a token spanning start..cursor"""
        return Tok(
            type=token_type,
            value=value,
            pos=start,
            length=self.scanner.position - start,
            line=self.line,
            column=start - self.line_start + 1,
        )


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source, EOF included"""
    return list(Tokenizer(source))
