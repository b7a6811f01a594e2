"""Render Rox AST nodes as parenthesized prefix expressions.

    1 + 2 * 3        ->  (+ 1 (* 2 3))
    (1 + 2) * 3      ->  (* (group (+ 1 2)) 3)
    var a = -b;      ->  (var a (- b))
"""

from __future__ import annotations

from .ast import (
    Node, Literal, Grouping, Unary, Binary, Variable, Assign,
    Expression, Print, Var, Block,
)
from .types import to_runtime_string


def parenthesize(name: str, *parts: Node) -> str:
    inner = ' '.join(print_ast(p) for p in parts)
    return f"({name} {inner})" if inner else f"({name})"


def print_ast(node: Node) -> str:
    if isinstance(node, Literal):
        return to_runtime_string(node.value)
    if isinstance(node, Grouping):
        return parenthesize('group', node.expression)
    if isinstance(node, Unary):
        return parenthesize(node.operator.lexeme, node.right)
    if isinstance(node, Binary):
        return parenthesize(node.operator.lexeme, node.left, node.right)
    if isinstance(node, Variable):
        return node.name.lexeme
    if isinstance(node, Assign):
        return f"(= {node.name.lexeme} {print_ast(node.value)})"
    if isinstance(node, Expression):
        return parenthesize(';', node.expression)
    if isinstance(node, Print):
        return parenthesize('print', node.expression)
    if isinstance(node, Var):
        if node.initializer is None:
            return f"(var {node.name.lexeme})"
        return f"(var {node.name.lexeme} {print_ast(node.initializer)})"
    if isinstance(node, Block):
        return parenthesize('block', *node.statements)
    raise NotImplementedError(f"print_ast: unexpected node type {type(node)}")
