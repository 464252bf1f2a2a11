"""Textual renderings of the AST.

``render`` is the canonical debugging/test-oracle form::

    (<left> <op> <right>)   (<op> <inner>)   'name'id   42i   3.14f   true

``to_source`` writes text the parser accepts again and that parses back to a
structurally equal tree.
"""

from __future__ import annotations

from typing import List

from lark import Token, Transformer, Tree

from . import tree as ast

BINARY_OPS = {
    ast.ADDITION: '+',
    ast.SUBTRACTION: '-',
    ast.MULTIPLICATION: '*',
    ast.DIVISION: '/',
    ast.LESS: '<',
    ast.GREATER: '>',
    ast.LESS_EQUAL: '<=',
    ast.GREATER_EQUAL: '>=',
    ast.NOT_EQUAL: '!=',
    ast.EQUAL: '==',
    ast.ASSIGNMENT: '=',
}

UNARY_OPS = {
    ast.PLUS: '+',
    ast.MINUS: '-',
    ast.NOT: '!',
}


def _bool_text(value: object) -> str:
    return 'true' if value else 'false'


class Renderer(Transformer):
    """Bottom-up rendering into the canonical form."""

    def __default__(self, data: str, children: List, meta) -> str:
        if data in BINARY_OPS:
            lhs, rhs = children
            return f"({lhs} {BINARY_OPS[data]} {rhs})"

        if data in UNARY_OPS:
            return f"({UNARY_OPS[data]} {children[0]})"

        if data == ast.DECLARATION:
            var, type_, value = children
            return f"({var}:{type_}={value})"

        if data in ast.LEAF_KINDS:
            return self.leaf(data, children[0])

        if data in ast.SENTINEL_KINDS:
            return data

        raise ValueError(f"unknown node kind {data!r}")

    def leaf(self, kind: str, token: Token) -> str:
        value = token.value
        if kind == ast.IDENTIFIER:
            return f"'{value}'id"
        if kind == ast.INT:
            return f"{value}i"
        if kind == ast.FLOAT:
            return f"{value!r}f"
        return _bool_text(value)


class SourceWriter(Transformer):
    """
    Bottom-up rendering into parser input.

    Binary and unary nodes are always parenthesized and negative numbers are
    written as (-N), so every right operand reads back as a literal.
    """

    def __default__(self, data: str, children: List, meta) -> str:
        if data == ast.ASSIGNMENT:
            var, value = children
            return f"{var} = {value}"

        if data in BINARY_OPS:
            lhs, rhs = children
            return f"({lhs} {BINARY_OPS[data]} {rhs})"

        if data in UNARY_OPS:
            return f"({UNARY_OPS[data]}{children[0]})"

        if data == ast.DECLARATION:
            var, type_, value = children
            text = f"{var}: {type_}".rstrip()
            if value:
                text += f" = {value}"
            return text

        if data in ast.LEAF_KINDS:
            return self.leaf(data, children[0])

        if data in ast.SENTINEL_KINDS:
            return ''

        raise ValueError(f"unknown node kind {data!r}")

    def leaf(self, kind: str, token: Token) -> str:
        value = token.value
        if kind == ast.IDENTIFIER:
            return str(value)
        if kind == ast.BOOL:
            return _bool_text(value)

        text = repr(value) if kind == ast.FLOAT else str(value)
        if kind == ast.FLOAT:
            mantissa, sep, exponent = text.partition('e')
            if '.' not in mantissa:
                text = f"{mantissa}.0{sep}{exponent}"

        if text.startswith('-'):
            return f"({text})"
        return text


def render(node: Tree) -> str:
    """Canonical text of a node, e.g. ``(1i + (2i * 3i))``."""
    return Renderer().transform(node)


def to_source(node: Tree) -> str:
    """Source text that parses back to a tree equal to ``node``."""
    return SourceWriter().transform(node)
