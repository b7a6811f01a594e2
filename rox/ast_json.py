"""JSON serialization/deserialization for Rox AST.

This module converts between Rox AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Tokens keep their
line numbers so that a program loaded back from JSON reports runtime
errors at the same lines as the original source.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .ast import (
    Literal,
    Grouping,
    Unary,
    Binary,
    Variable,
    Assign,
    Expression,
    Print,
    Var,
    Block,
    Stmt,
)
from .tokens import Token, TokenType
from .types import Value, StringVal, DoubleVal, BoolVal, NilVal, NIL


def value_to_obj(v: Optional[Value]) -> Any:
    if v is None:
        return None
    if isinstance(v, StringVal):
        return {"kind": "String", "value": v.value}
    if isinstance(v, DoubleVal):
        return {"kind": "Double", "value": v.value}
    if isinstance(v, BoolVal):
        return {"kind": "Bool", "value": v.value}
    if isinstance(v, NilVal):
        return {"kind": "Nil"}
    raise ValueError(f"cannot serialize value {v!r}")


def value_from_obj(o: Any) -> Optional[Value]:
    if o is None:
        return None
    kind = o["kind"]
    if kind == "String":
        return StringVal(o["value"])
    if kind == "Double":
        return DoubleVal(float(o["value"]))
    if kind == "Bool":
        return BoolVal(bool(o["value"]))
    if kind == "Nil":
        return NIL
    raise ValueError(f"unknown value kind {kind!r}")


def token_to_obj(t: Token) -> Dict[str, Any]:
    return {
        "type": t.type.name,
        "lexeme": t.lexeme,
        "literal": value_to_obj(t.literal),
        "line": t.line,
    }


def token_from_obj(o: Dict[str, Any]) -> Token:
    return Token(TokenType[o["type"]], o["lexeme"], value_from_obj(o.get("literal")), int(o["line"]))


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None
    if isinstance(node, list):
        return [ast_to_obj(n) for n in node]

    # Expressions
    if isinstance(node, Literal):
        return {"type": "Literal", "value": value_to_obj(node.value)}
    if isinstance(node, Grouping):
        return {"type": "Grouping", "expression": ast_to_obj(node.expression)}
    if isinstance(node, Unary):
        return {
            "type": "Unary",
            "operator": token_to_obj(node.operator),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, Binary):
        return {
            "type": "Binary",
            "left": ast_to_obj(node.left),
            "operator": token_to_obj(node.operator),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, Variable):
        return {"type": "Variable", "name": token_to_obj(node.name)}
    if isinstance(node, Assign):
        return {
            "type": "Assign",
            "name": token_to_obj(node.name),
            "value": ast_to_obj(node.value),
        }

    # Statements
    if isinstance(node, Expression):
        return {"type": "Expression", "expression": ast_to_obj(node.expression)}
    if isinstance(node, Print):
        return {"type": "Print", "expression": ast_to_obj(node.expression)}
    if isinstance(node, Var):
        return {
            "type": "Var",
            "name": token_to_obj(node.name),
            "initializer": ast_to_obj(node.initializer),
        }
    if isinstance(node, Block):
        return {"type": "Block", "statements": [ast_to_obj(s) for s in node.statements]}

    raise TypeError(f"Unsupported node type for serialization: {type(node)}")


def ast_from_obj(o: Any) -> Any:
    if o is None:
        return None
    if isinstance(o, list):
        return [ast_from_obj(x) for x in o]
    if not isinstance(o, dict) or "type" not in o:
        raise ValueError(f"not an AST object: {o!r}")

    t = o["type"]
    if t == "Literal":
        return Literal(value_from_obj(o["value"]))
    if t == "Grouping":
        return Grouping(ast_from_obj(o["expression"]))
    if t == "Unary":
        return Unary(token_from_obj(o["operator"]), ast_from_obj(o["right"]))
    if t == "Binary":
        return Binary(ast_from_obj(o["left"]), token_from_obj(o["operator"]), ast_from_obj(o["right"]))
    if t == "Variable":
        return Variable(token_from_obj(o["name"]))
    if t == "Assign":
        return Assign(token_from_obj(o["name"]), ast_from_obj(o["value"]))
    if t == "Expression":
        return Expression(ast_from_obj(o["expression"]))
    if t == "Print":
        return Print(ast_from_obj(o["expression"]))
    if t == "Var":
        return Var(token_from_obj(o["name"]), ast_from_obj(o.get("initializer")))
    if t == "Block":
        return Block(tuple(ast_from_obj(s) for s in o["statements"]))

    raise ValueError(f"Unknown AST node type: {t}")


def program_to_obj(statements: List[Stmt]) -> Dict[str, Any]:
    return {"type": "Program", "body": [ast_to_obj(s) for s in statements]}


def program_from_obj(o: Dict[str, Any]) -> List[Stmt]:
    if o.get("type") != "Program":
        raise ValueError("expected a Program object")
    return [ast_from_obj(s) for s in o["body"]]
