"""
Recursive Descent Parser for descent

Parses exactly one statement per call.

Structure:
- Tokenizer: pull-based token stream from source (lexer_rd)
- Parser: recursive descent over precedence tiers with a 3-slot token window
- AST: lark Trees tagged with the node kind (tree)

Disambiguation between declaration / assignment / expression is done with
two tokens of lookahead only; the parser never rewinds the token stream.
"""

from __future__ import annotations

import sys
from typing import Optional, TextIO, Type

from lark import Tree

from . import tree as ast
from .diagnostics import format_diagnostic
from .errors import (
    ParseError,
    MalformedCharacterError,
    UnbalancedParenthesisError,
    MissingValueError,
    UnparenthesizedUnaryError,
    MissingEndOfStatementError,
    MalformedDeclarationError,
    NumberOutOfRangeError,
)
from .lexer_rd import Tokenizer, MAX_INT_DIGITS
from .token_types import TT, Tok, SPELLING

COMPARISON_OPS = {
    TT.LTE: ast.LESS_EQUAL,
    TT.GTE: ast.GREATER_EQUAL,
    TT.NEQ: ast.NOT_EQUAL,
    TT.EQ: ast.EQUAL,
    TT.LT: ast.LESS,
    TT.GT: ast.GREATER,
}

SUM_OPS = {
    TT.PLUS: ast.ADDITION,
    TT.MINUS: ast.SUBTRACTION,
}

PRODUCT_OPS = {
    TT.SLASH: ast.DIVISION,
    TT.STAR: ast.MULTIPLICATION,
}

UNARY_OPS = {
    TT.PLUS: ast.PLUS,
    TT.MINUS: ast.MINUS,
    TT.NEG: ast.NOT,
}

STATEMENT_TERMINATORS = (TT.SEMI, TT.NEWLINE)

# ============================================================================
# Parser
# ============================================================================

class Parser:
    """
    Recursive descent parser for a single statement.

    Expression precedence (lowest to highest):
    1. comparison (<=, >=, !=, ==, <, >) - one flat tier
    2. sum (+, -)
    3. product (/, *) - right operand is a bare literal
    4. unary (+, -, !) - operand is a bare literal
    5. literal (parenthesized expr, true/false, identifier, number)

    All binary tiers are left associative.
    """

    def __init__(self, tokenizer: Tokenizer, err: Optional[TextIO] = None):
        self.tokenizer = tokenizer
        self.source = tokenizer.source
        self.err = err

        # Token window: previous (consumed), current (la0), next (la1)
        self.previous = Tok(TT.BOF, None)
        self.current = tokenizer.next_token()
        self.next = tokenizer.next_token()

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def advance(self) -> Tok:
        """Consume current token and shift the window by one"""
        consumed = self.current
        self.previous = consumed
        self.current = self.next
        self.next = self.tokenizer.next_token()
        return consumed

    def match(self, kind0: TT, kind1: Optional[TT] = None) -> bool:
        """Test current (and next, when given) without consuming"""
        if self.current.type != kind0:
            return False
        return kind1 is None or self.next.type == kind1

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def accept(self, token_type: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(token_type):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, error_cls: Type[ParseError], message: str,
               continuation: Optional[str] = None) -> Tok:
        """Consume token of expected type or raise error_cls"""
        if not self.check(token_type):
            self._reject_bad_token()
            raise self.error(error_cls, message, continuation)
        return self.advance()

    def error(self, error_cls: Type[ParseError], message: str,
              continuation: Optional[str] = None) -> ParseError:
        """Build a failure pointing at the current token"""
        return error_cls(message, self.current, self.previous, continuation)

    def _reject_bad_token(self) -> None:
        """Lexical failures surface wherever the grammar meets them"""
        if self.check(TT.BAD_NUMBER):
            text = self.current.value
            if len(text) > 24:
                text = text[:20] + "..."
            raise self.error(
                NumberOutOfRangeError,
                f"Number literal {text} is out of range",
                f"Integers are limited to {MAX_INT_DIGITS} digits and floats must be finite.",
            )
        if self.check(TT.BAD_CHAR):
            ch = self.current.value
            raise self.error(
                MalformedCharacterError,
                f"Unexpected character {ch!r}",
                "Only ASCII letters, digits, '_', whitespace and ( ) , : ; . + - * / ! = < > are allowed.",
            )

    def _reject_unary_operand(self, op: Tok) -> None:
        """A binary operator's right operand may not start with a prefix"""
        if self.check(TT.PLUS, TT.MINUS, TT.NEG):
            prefix = SPELLING[self.current.type]
            raise self.error(
                UnparenthesizedUnaryError,
                f"Unary '{prefix}' must be parenthesized after '{SPELLING[op.type]}'",
                f"Write it as {SPELLING[op.type]} ({prefix}...) instead.",
            )

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> Tree:
        """
        Parse one statement, absorbing structured failures.

        On failure the diagnostic goes to the error stream and the none
        sentinel is returned in place of a tree.
        """
        try:
            return self.parse_statement()
        except ParseError as exc:
            stream = self.err if self.err is not None else sys.stderr
            print(format_diagnostic(self.source, exc), file=stream)
            return ast.none()

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Tree:
        """
        Parse a single statement:
        declaration | assignment | expression, then ';' or newline
        """
        if self.check(TT.EOF):
            return ast.none()
        # A terminator with nothing before it is an empty statement
        if self.check(*STATEMENT_TERMINATORS):
            self.advance()
            return ast.none()

        stmt = self.parse_declaration()
        if ast.is_failed(stmt):
            stmt = self.parse_assignment()
        if ast.is_failed(stmt):
            stmt = self.parse_expr()

        self.parse_end_of_statement()
        return stmt

    def parse_end_of_statement(self) -> None:
        for terminator in STATEMENT_TERMINATORS:
            if self.accept(terminator):
                return
        if self.check(TT.EOF):
            return

        self._reject_bad_token()
        raise self.error(
            MissingEndOfStatementError,
            f"Expected ';' or a newline after the statement, got {self.current.describe()}",
        )

    def parse_declaration(self) -> Tree:
        """
        Parse declaration: ident ':' [ident] ['=' expr]
        Only tried when the lookahead is IDENT ':'.
        """
        if not self.match(TT.IDENT, TT.COLON):
            return ast.failed()

        name_tok = self.advance()
        self.advance()  # ':'
        var = ast.identifier(name_tok.value, name_tok)

        type_ = ast.none()
        if self.check(TT.IDENT):
            type_tok = self.advance()
            type_ = ast.identifier(type_tok.value, type_tok)

        value = ast.none()
        if self.accept(TT.ASSIGN):
            value = self.parse_expr()

        if ast.is_none(type_) and ast.is_none(value):
            self._reject_bad_token()
            name = name_tok.value
            raise self.error(
                MalformedDeclarationError,
                f"Declaration of '{name}' needs a type, an initial value or both",
                f"Write {name}: <type>, {name}: = <value> or {name}: <type> = <value>.",
            )

        return ast.declaration(var, type_, value)

    def parse_assignment(self) -> Tree:
        """
        Parse assignment: ident '=' expr
        Only tried when the lookahead is IDENT '='.
        """
        if not self.match(TT.IDENT, TT.ASSIGN):
            return ast.failed()

        name_tok = self.advance()
        self.advance()  # '='
        value = self.parse_expr()
        return ast.binary(ast.ASSIGNMENT, ast.identifier(name_tok.value, name_tok), value)

    # ========================================================================
    # Expressions (precedence tiers, lowest first)
    # ========================================================================

    def parse_expr(self) -> Tree:
        return self.parse_comparison()

    def parse_comparison(self) -> Tree:
        """Parse comparison: sum (cmpop sum)*"""
        left = self.parse_sum()

        while self.check(*COMPARISON_OPS):
            op = self.advance()
            right = self.parse_sum()
            left = ast.binary(COMPARISON_OPS[op.type], left, right)

        return left

    def parse_sum(self) -> Tree:
        """Parse addition/subtraction: product (('+'|'-') product)*"""
        left = self.parse_product()

        while self.check(*SUM_OPS):
            op = self.advance()
            self._reject_unary_operand(op)
            right = self.parse_product()
            left = ast.binary(SUM_OPS[op.type], left, right)

        return left

    def parse_product(self) -> Tree:
        """Parse division/multiplication: unary (('/'|'*') literal)*"""
        left = self.parse_unary()

        while self.check(*PRODUCT_OPS):
            op = self.advance()
            self._reject_unary_operand(op)
            right = self._required_literal(f"Expected a value after '{SPELLING[op.type]}'")
            left = ast.binary(PRODUCT_OPS[op.type], left, right)

        return left

    def parse_unary(self) -> Tree:
        """
        Parse unary operators: +lit, -lit, !lit

        '+' on a number is dropped and '-' on a number is folded into the
        literal; everything else is wrapped in a unary node.
        """
        if not self.check(*UNARY_OPS):
            return self._required_literal("Expected a value")

        op = self.advance()
        operand = self._required_literal(f"Expected a value after '{SPELLING[op.type]}'")

        if ast.is_number(operand):
            if op.type == TT.PLUS:
                return operand
            if op.type == TT.MINUS:
                return ast.negated(operand)

        return ast.unary(UNARY_OPS[op.type], operand)

    def _required_literal(self, message: str) -> Tree:
        literal = self.parse_literal()
        if ast.is_failed(literal):
            raise self.error(
                MissingValueError,
                f"{message}, got {self.current.describe()}",
            )
        return literal

    def parse_literal(self) -> Tree:
        """
        Parse literal:
        '(' expr ')' | true | false | identifier | number

        Returns the failed sentinel when nothing matches.
        """
        self._reject_bad_token()

        if self.accept(TT.LPAR):
            opening = self.previous
            expr = self.parse_expr()
            self.expect(
                TT.RPAR,
                UnbalancedParenthesisError,
                f"Expected ')' to close '(' at col {opening.column}, got {self.current.describe()}",
            )
            return expr

        if self.check(TT.TRUE, TT.FALSE):
            tok = self.advance()
            return ast.bool_literal(tok.value, tok)

        if self.check(TT.IDENT):
            tok = self.advance()
            return ast.identifier(tok.value, tok)

        if self.check(TT.INT):
            tok = self.advance()
            return ast.int_literal(tok.value, tok)

        if self.check(TT.FLOAT):
            tok = self.advance()
            return ast.float_literal(tok.value, tok)

        return ast.failed()

# ============================================================================
# Entry Points
# ============================================================================

def parse_source(source: str, err: Optional[TextIO] = None) -> Tree:
    """
    Parse one statement of source to an AST.

    Never raises for bad input: the diagnostic is written to ``err``
    (sys.stderr by default) and the none sentinel is returned.
    """
    parser = Parser(Tokenizer(source), err=err)
    return parser.parse()


def parse_statement(source: str) -> Tree:
    """Parse one statement, letting ParseError propagate."""
    return Parser(Tokenizer(source)).parse_statement()


def parse_expr_fragment(source: str) -> Tree:
    """
    Parse a standalone expression fragment.
    The whole fragment must be consumed.
    """
    parser = Parser(Tokenizer(source))
    expr = parser.parse_expr()

    if not parser.check(TT.EOF):
        raise parser.error(
            MissingEndOfStatementError,
            f"Unexpected {parser.current.describe()} after expression",
        )
    return expr
