"""Recursive-descent parser for the Rox language.

Grammar, lowest precedence first:

    program     -> declaration* EOF
    declaration -> var_decl | statement
    var_decl    -> "var" IDENTIFIER ( "=" expression )? ";"
    statement   -> print_stmt | block | expr_stmt
    expression  -> assignment
    assignment  -> IDENTIFIER "=" assignment | equality
    equality    -> comparison ( ( "!=" | "==" ) comparison )*
    comparison  -> term ( ( ">" | ">=" | "<" | "<=" ) term )*
    term        -> factor ( ( "-" | "+" ) factor )*
    factor      -> unary ( ( "/" | "*" ) unary )*
    unary       -> ( "!" | "-" ) unary | primary
    primary     -> NUMBER | STRING | "true" | "false" | "nil"
                 | IDENTIFIER | "(" expression ")"

When a required token is missing the parser reports it, raises
`ParseError` out of the current production and resynchronizes at the
next statement boundary, so every syntax error in a file gets reported
in one run.
"""

from __future__ import annotations

from typing import List, Optional

from .ast import (
    Expr, Stmt, Literal, Grouping, Unary, Binary, Variable, Assign,
    Expression, Print, Var, Block,
)
from .errors import ErrorKind, ErrorReporter, ParseError
from .scanner import scan
from .tokens import STATEMENT_STARTS, Token, TokenType
from .types import FALSE, NIL, TRUE


class Parser:
    def __init__(self, tokens: List[Token], reporter: Optional[ErrorReporter] = None):
        self.tokens = tokens
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.pos = 0

    def parse(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.is_at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    # Token helpers

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def is_at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    def advance(self) -> Token:
        if not self.is_at_end():
            self.pos += 1
        return self.previous()

    def check(self, token_type: TokenType) -> bool:
        return self.peek().type == token_type

    def match(self, *token_types: TokenType) -> bool:
        for token_type in token_types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def consume(self, token_type: TokenType, message: str) -> Token:
        if self.check(token_type):
            return self.advance()
        raise self.error(self.peek(), message, ErrorKind.MISSING_TOKEN)

    def error(self, token: Token, message: str, kind: ErrorKind) -> ParseError:
        self.reporter.token_error(token, message, kind)
        return ParseError(kind, message, token)

    def synchronize(self):
        self.advance()
        while not self.is_at_end():
            if self.previous().type == TokenType.SEMICOLON:
                return
            if self.peek().type in STATEMENT_STARTS:
                return
            self.advance()

    # Declarations and statements

    def parse_declaration(self) -> Optional[Stmt]:
        try:
            if self.match(TokenType.VAR):
                return self.parse_var_decl()
            return self.parse_statement()
        except ParseError:
            self.synchronize()
            return None
        except RecursionError:
            self.error(self.peek(), 'Too much nesting.', ErrorKind.TOO_DEEP)
            self.synchronize()
            return None

    def parse_var_decl(self) -> Var:
        name = self.consume(TokenType.IDENTIFIER, 'Expect variable name.')
        initializer = None
        if self.match(TokenType.EQUAL):
            initializer = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return Var(name, initializer)

    def parse_statement(self) -> Stmt:
        if self.match(TokenType.PRINT):
            return self.parse_print_stmt()
        if self.match(TokenType.LEFT_BRACE):
            return Block(tuple(self.parse_block()))
        return self.parse_expr_stmt()

    def parse_print_stmt(self) -> Print:
        value = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return Print(value)

    def parse_block(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def parse_expr_stmt(self) -> Expression:
        expr = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return Expression(expr)

    # Expressions

    def parse_expression(self) -> Expr:
        return self.parse_assign()

    def parse_assign(self) -> Expr:
        expr = self.parse_equality()
        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.parse_assign()
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            # Reported but not raised: the parser is not confused.
            self.error(equals, 'Invalid assignment target.', ErrorKind.INVALID_ASSIGNMENT_TARGET)
        return expr

    def parse_equality(self) -> Expr:
        expr = self.parse_comparison()
        while self.match(TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL):
            operator = self.previous()
            right = self.parse_comparison()
            expr = Binary(expr, operator, right)
        return expr

    def parse_comparison(self) -> Expr:
        expr = self.parse_term()
        while self.match(TokenType.GREATER, TokenType.GREATER_EQUAL,
                         TokenType.LESS, TokenType.LESS_EQUAL):
            operator = self.previous()
            right = self.parse_term()
            expr = Binary(expr, operator, right)
        return expr

    def parse_term(self) -> Expr:
        expr = self.parse_factor()
        while self.match(TokenType.MINUS, TokenType.PLUS):
            operator = self.previous()
            right = self.parse_factor()
            expr = Binary(expr, operator, right)
        return expr

    def parse_factor(self) -> Expr:
        expr = self.parse_unary()
        while self.match(TokenType.SLASH, TokenType.STAR):
            operator = self.previous()
            right = self.parse_unary()
            expr = Binary(expr, operator, right)
        return expr

    def parse_unary(self) -> Expr:
        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.previous()
            right = self.parse_unary()
            return Unary(operator, right)
        return self.parse_primary()

    def parse_primary(self) -> Expr:
        if self.match(TokenType.FALSE):
            return Literal(FALSE)
        if self.match(TokenType.TRUE):
            return Literal(TRUE)
        if self.match(TokenType.NIL):
            return Literal(NIL)
        if self.match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self.previous().literal)
        if self.match(TokenType.IDENTIFIER):
            return Variable(self.previous())
        if self.match(TokenType.LEFT_PAREN):
            expr = self.parse_expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)
        raise self.error(self.peek(), 'Expect expression.', ErrorKind.UNMATCHED_PRIMARY)


def parse_program(source: str, reporter: Optional[ErrorReporter] = None) -> List[Stmt]:
    """Scan and parse `source`. Errors go to `reporter`; check `had_error`."""
    if reporter is None:
        reporter = ErrorReporter()
    tokens = scan(source, reporter)
    return Parser(tokens, reporter).parse()
