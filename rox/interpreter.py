"""Tree-walking interpreter for the Rox language.

Statements are executed one at a time against a chain of `Environment`
frames. A runtime error aborts only the top-level statement it occurred
in: it is reported and execution carries on with the next statement.
"""

from __future__ import annotations

import math
from typing import List, Optional, TextIO

from .ast import (
    Expr, Stmt, Literal, Grouping, Unary, Binary, Variable, Assign,
    Expression, Print, Var, Block,
)
from .environment import Environment
from .errors import ErrorKind, ErrorReporter, RoxRuntimeError
from .grammar import parse_with_grammar
from .parser import parse_program
from .tokens import Token, TokenType
from .types import (
    Value, StringVal, DoubleVal, BoolVal, NIL,
    is_truthy, values_equal, to_runtime_string, to_display_string, type_name,
)


ARITHMETIC_OPS = {TokenType.MINUS, TokenType.STAR, TokenType.SLASH}
ORDERING_OPS = {TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL}


def divide(a: float, b: float) -> float:
    # IEEE semantics instead of ZeroDivisionError
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        sign = math.copysign(1.0, a) * math.copysign(1.0, b)
        return math.copysign(math.inf, sign)
    return a / b


class Interpreter:
    """Core interpreter that executes Rox statements."""
    def __init__(self, reporter: Optional[ErrorReporter] = None, out: Optional[TextIO] = None,
                 debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.out = out
        self.globals = Environment()
        self.environment = self.globals
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0 and self.debug_fp:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def interpret(self, statements: List[Stmt]):
        for stmt in statements:
            if self.debug_level >= 1:
                self.debug(f"execute {type(stmt).__name__}")
            try:
                self.execute(stmt)
            except RoxRuntimeError as e:
                if self.debug_level >= 1:
                    self.debug(f"runtime error: {e.message}")
                self.reporter.runtime_error(e)

    def execute_block(self, statements: List[Stmt], env: Environment):
        previous = self.environment
        self.environment = env
        if self.debug_level >= 3:
            self.debug(f"enter scope depth {env.depth}")
        try:
            for stmt in statements:
                self.execute(stmt)
        finally:
            self.environment = previous
            if self.debug_level >= 3:
                self.debug(f"leave scope depth {env.depth}")

    def execute(self, node: Stmt):
        if isinstance(node, Expression):
            self.evaluate(node.expression)
            return
        if isinstance(node, Print):
            value = self.evaluate(node.expression)
            print(to_runtime_string(value), file=self.out)
            return
        if isinstance(node, Var):
            value = self.evaluate(node.initializer) if node.initializer is not None else None
            self.environment.define(node.name.lexeme, value)
            if self.debug_level >= 2:
                shown = to_display_string(value) if value is not None else '<uninitialized>'
                self.debug(f"declare {node.name.lexeme} = {shown}")
            return
        if isinstance(node, Block):
            self.execute_block(node.statements, Environment(enclosing=self.environment))
            return
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def evaluate(self, node: Expr) -> Value:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Grouping):
            return self.evaluate(node.expression)
        if isinstance(node, Unary):
            return self.evaluate_unary(node.operator, self.evaluate_operand(node.right, node.operator))
        if isinstance(node, Binary):
            left = self.evaluate_operand(node.left, node.operator)
            right = self.evaluate_operand(node.right, node.operator)
            return self.evaluate_binary(node.operator, left, right)
        if isinstance(node, Variable):
            value = self.environment.get(node.name)
            return value if value is not None else NIL
        if isinstance(node, Assign):
            value = self.evaluate_operand(node.value, node.name)
            self.environment.assign(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"assign {node.name.lexeme} = {to_display_string(value)}")
            return value
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def evaluate_operand(self, node: Expr, operator: Token) -> Value:
        try:
            return self.evaluate(node)
        except RecursionError:
            raise RoxRuntimeError(ErrorKind.TOO_DEEP, operator, 'Too much nesting.') from None

    def evaluate_unary(self, operator: Token, right: Value) -> Value:
        if operator.type == TokenType.MINUS:
            if not isinstance(right, DoubleVal):
                raise RoxRuntimeError(ErrorKind.INVALID_OPERAND, operator, 'Operand must be a number.')
            return DoubleVal(-right.value)
        if operator.type == TokenType.BANG:
            return BoolVal(not is_truthy(right))
        raise RoxRuntimeError(ErrorKind.INVALID_OPERAND, operator,
                              f"Unrecognised unary operator '{operator.lexeme}'.")

    def evaluate_binary(self, operator: Token, left: Value, right: Value) -> Value:
        op = operator.type
        if op == TokenType.EQUAL_EQUAL:
            return BoolVal(values_equal(left, right))
        if op == TokenType.BANG_EQUAL:
            return BoolVal(not values_equal(left, right))
        if op == TokenType.PLUS:
            if isinstance(left, DoubleVal) and isinstance(right, DoubleVal):
                return DoubleVal(left.value + right.value)
            if isinstance(left, StringVal) and isinstance(right, StringVal):
                return StringVal(left.value + right.value)
            raise RoxRuntimeError(ErrorKind.INVALID_OPERAND, operator,
                                  'Operands must be two numbers or two strings.')
        if op in ARITHMETIC_OPS or op in ORDERING_OPS:
            if not (isinstance(left, DoubleVal) and isinstance(right, DoubleVal)):
                if self.debug_level >= 2:
                    self.debug(f"bad operands for {operator.lexeme}: {type_name(left)}, {type_name(right)}")
                raise RoxRuntimeError(ErrorKind.INVALID_OPERAND, operator, 'Operands must be numbers.')
            a, b = left.value, right.value
            if op == TokenType.MINUS: return DoubleVal(a - b)
            if op == TokenType.STAR: return DoubleVal(a * b)
            if op == TokenType.SLASH: return DoubleVal(divide(a, b))
            if op == TokenType.GREATER: return BoolVal(a > b)
            if op == TokenType.GREATER_EQUAL: return BoolVal(a >= b)
            if op == TokenType.LESS: return BoolVal(a < b)
            if op == TokenType.LESS_EQUAL: return BoolVal(a <= b)
        raise RoxRuntimeError(ErrorKind.INVALID_OPERAND, operator,
                              f"Unrecognised binary operator '{operator.lexeme}'.")


def run_program(source: str, interpreter: Optional[Interpreter] = None,
                reporter: Optional[ErrorReporter] = None, *,
                use_grammar: bool = False) -> ErrorReporter:
    """Scan, parse and run `source`, returning the reporter holding any diagnostics.

    Nothing is executed if a scan or parse error was reported. Passing an
    existing interpreter keeps its global variables between calls. A
    `reporter` given here replaces the interpreter's own. With
    `use_grammar` the LALR front end in `rox.grammar` parses the source.
    """
    if interpreter is None:
        interpreter = Interpreter(reporter=reporter)
    elif reporter is not None:
        interpreter.reporter = reporter
    reporter = interpreter.reporter
    if use_grammar:
        statements = parse_with_grammar(source, reporter)
    else:
        statements = parse_program(source, reporter)
    if reporter.had_error:
        return reporter
    interpreter.interpret(statements)
    return reporter
