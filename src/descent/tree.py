"""AST node model shared by the parser and the renderers.

Every node is a ``lark.Tree`` whose ``data`` is the node kind and whose
children are the kind's payload. Leaves wrap a single ``lark.Token`` that
carries the literal value and its span in the source. Each production builds
fresh nodes, so a child always has exactly one parent.
"""
from __future__ import annotations

from typing import Iterator, List, Optional

from lark import Token, Tree
from typing_extensions import TypeGuard

from .token_types import Tok

# Statement kinds
DECLARATION = 'declaration'
ASSIGNMENT = 'assignment'

# Binary kinds
ADDITION = 'addition'
SUBTRACTION = 'subtraction'
MULTIPLICATION = 'multiplication'
DIVISION = 'division'
LESS = 'less'
GREATER = 'greater'
LESS_EQUAL = 'less_equal'
GREATER_EQUAL = 'greater_equal'
NOT_EQUAL = 'not_equal'
EQUAL = 'equal'

# Unary kinds
PLUS = 'plus'
MINUS = 'minus'
NOT = 'not'

# Leaf kinds
IDENTIFIER = 'identifier'
INT = 'int'
FLOAT = 'float'
BOOL = 'bool'

# Sentinels
NONE = 'none'
FAILED = 'failed'

BINARY_KINDS = frozenset({
    ADDITION, SUBTRACTION, MULTIPLICATION, DIVISION,
    LESS, GREATER, LESS_EQUAL, GREATER_EQUAL, NOT_EQUAL, EQUAL,
    ASSIGNMENT,
})
UNARY_KINDS = frozenset({PLUS, MINUS, NOT})
LEAF_KINDS = frozenset({IDENTIFIER, INT, FLOAT, BOOL})
NUMBER_KINDS = frozenset({INT, FLOAT})
SENTINEL_KINDS = frozenset({NONE, FAILED})

# Leaf kind -> type of the payload token
LEAF_TOKEN_TYPES = {
    IDENTIFIER: 'IDENTIFIER',
    INT: 'INT',
    FLOAT: 'FLOAT',
    BOOL: 'BOOL',
}


# ============================================================================
# Constructors
# ============================================================================

def _leaf_token(kind: str, value: object, tok: Optional[Tok]) -> Token:
    token_type = LEAF_TOKEN_TYPES[kind]
    if tok is None:
        return Token(token_type, value)

    return Token(token_type, value,
                 start_pos=tok.pos, line=tok.line, column=tok.column,
                 end_line=tok.line, end_column=tok.column + tok.length,
                 end_pos=tok.end)


def leaf(kind: str, value: object, tok: Optional[Tok] = None) -> Tree:
    """Build a literal/identifier node; ``tok`` supplies the source span."""
    assert kind in LEAF_KINDS, f"{kind!r} is not a leaf kind"
    return Tree(kind, [_leaf_token(kind, value, tok)])


def identifier(name: str, tok: Optional[Tok] = None) -> Tree:
    return leaf(IDENTIFIER, name, tok)


def int_literal(value: int, tok: Optional[Tok] = None) -> Tree:
    return leaf(INT, value, tok)


def float_literal(value: float, tok: Optional[Tok] = None) -> Tree:
    return leaf(FLOAT, value, tok)


def bool_literal(value: bool, tok: Optional[Tok] = None) -> Tree:
    return leaf(BOOL, value, tok)


def binary(kind: str, left: Tree, right: Tree) -> Tree:
    assert kind in BINARY_KINDS, f"{kind!r} is not a binary kind"
    return Tree(kind, [left, right])


def unary(kind: str, inner: Tree) -> Tree:
    assert kind in UNARY_KINDS, f"{kind!r} is not a unary kind"
    return Tree(kind, [inner])


def declaration(var: Tree, type_: Tree, value: Tree) -> Tree:
    return Tree(DECLARATION, [var, type_, value])


def negated(node: Tree) -> Tree:
    """Fold a unary minus into a numeric leaf, keeping its source span."""
    assert node.data in NUMBER_KINDS, f"cannot negate a {node.data!r} node"
    token = leaf_token(node)
    return Tree(node.data, [token.update(value=-token.value)])


def none() -> Tree:
    """Explicitly absent but syntactically valid."""
    return Tree(NONE, [])


def failed() -> Tree:
    """No production matched."""
    return Tree(FAILED, [])


# ============================================================================
# Inspection
# ============================================================================

def is_tree(node: object) -> TypeGuard[Tree]:
    return isinstance(node, Tree)


def is_failed(node: Tree) -> bool:
    return node.data == FAILED


def is_none(node: Tree) -> bool:
    return node.data == NONE


def is_number(node: Tree) -> bool:
    return node.data in NUMBER_KINDS


def leaf_token(node: Tree) -> Token:
    assert node.data in LEAF_KINDS, f"{node.data!r} node has no payload token"
    return node.children[0]


def leaf_value(node: Tree) -> object:
    return leaf_token(node).value


def left(node: Tree) -> Tree:
    assert node.data in BINARY_KINDS
    return node.children[0]


def right(node: Tree) -> Tree:
    assert node.data in BINARY_KINDS
    return node.children[1]


def inner(node: Tree) -> Tree:
    assert node.data in UNARY_KINDS
    return node.children[0]


def decl_var(node: Tree) -> Tree:
    assert node.data == DECLARATION
    return node.children[0]


def decl_type(node: Tree) -> Tree:
    assert node.data == DECLARATION
    return node.children[1]


def decl_value(node: Tree) -> Tree:
    assert node.data == DECLARATION
    return node.children[2]


def subtrees(node: Tree) -> List[Tree]:
    """Direct child nodes (payload tokens excluded)."""
    return [ch for ch in node.children if is_tree(ch)]


def walk(node: Tree) -> Iterator[Tree]:
    """Pre-order traversal over every node."""
    yield node
    for child in subtrees(node):
        yield from walk(child)
