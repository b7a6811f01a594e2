"""Grammar-driven front end for the Rox language.

The same language accepted by `rox.parser`, described as a Lark grammar
and parsed with Lark's LALR parser. The parse tree is transformed into
the very AST classes the hand-written parser builds, so for any valid
program both front ends produce equal trees.

There is no error recovery here: the first syntax error is reported
and parsing stops. `rox.parser` remains the front end used by default.
"""

from __future__ import annotations

from typing import List, Optional

from lark import Lark, Token as LarkToken, Transformer, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken

from .ast import (
    Stmt, Literal, Grouping, Unary, Binary, Variable, Assign,
    Expression, Print, Var, Block,
)
from .errors import ErrorKind, ErrorReporter
from .tokens import KEYWORDS, Token, TokenType
from .types import DoubleVal, StringVal, FALSE, NIL, TRUE


ROX_GRAMMAR = r"""
    program: declaration*

    ?declaration: var_decl
                | statement

    var_decl: "var" IDENTIFIER ("=" expression)? ";"

    ?statement: print_stmt
              | block
              | expr_stmt

    print_stmt: "print" expression ";"
    block: "{" declaration* "}"
    expr_stmt: expression ";"

    // Expressions with precedence
    ?expression: assignment
    ?assignment: IDENTIFIER "=" assignment -> assign
               | equality
    ?equality: comparison ((BANG_EQUAL | EQUAL_EQUAL) comparison)*
    ?comparison: term ((GREATER | GREATER_EQUAL | LESS | LESS_EQUAL) term)*
    ?term: factor ((MINUS | PLUS) factor)*
    ?factor: unary ((SLASH | STAR) unary)*
    ?unary: (BANG | MINUS) unary
          | primary
    ?primary: NUMBER -> number
            | STRING -> string
            | "true" -> true_lit
            | "false" -> false_lit
            | "nil" -> nil_lit
            | IDENTIFIER -> variable
            | "(" expression ")" -> grouping

    // Operators keep their names so they survive into the tree
    BANG_EQUAL: "!="
    EQUAL_EQUAL: "=="
    GREATER_EQUAL: ">="
    GREATER: ">"
    LESS_EQUAL: "<="
    LESS: "<"
    MINUS: "-"
    PLUS: "+"
    SLASH: "/"
    STAR: "*"
    BANG: "!"

    IDENTIFIER: /[A-Za-z_][A-Za-z0-9_]*/
    NUMBER: /[0-9]+(\.[0-9]+)?/
    STRING: /"[^"]*"/

    COMMENT: /\/\/[^\n]*/
    WS: /[ \t\r\n]+/
    %ignore COMMENT
    %ignore WS
"""


ROX_PARSER = Lark(
    ROX_GRAMMAR,
    start='program',
    parser='lalr',
    lexer='basic',
    propagate_positions=True,
    maybe_placeholders=False,
)


def to_token(lark_token) -> Token:
    # operator and identifier terminals are named after TokenType members
    return Token(TokenType[lark_token.type], str(lark_token), None, lark_token.line)


class ASTTransformer(Transformer):
    """Transforms the raw parse tree into an AST."""

    def program(self, items):
        return list(items)

    def var_decl(self, items):
        name = to_token(items[0])
        initializer = items[1] if len(items) > 1 else None
        return Var(name, initializer)

    def print_stmt(self, items):
        return Print(items[0])

    def block(self, items):
        return Block(tuple(items))

    def expr_stmt(self, items):
        return Expression(items[0])

    # Expressions
    def assign(self, items):
        return Assign(to_token(items[0]), items[1])

    def binary_expr(self, items):
        # items pattern: expr (op expr)*, folded to the left
        left = items[0]
        i = 1
        while i < len(items):
            left = Binary(left, to_token(items[i]), items[i + 1])
            i += 2
        return left

    equality = binary_expr
    comparison = binary_expr
    term = binary_expr
    factor = binary_expr

    def unary(self, items):
        return Unary(to_token(items[0]), items[1])

    def number(self, items):
        return Literal(DoubleVal(float(items[0])))

    def string(self, items):
        return Literal(StringVal(str(items[0])[1:-1]))

    def true_lit(self, items):
        return Literal(TRUE)

    def false_lit(self, items):
        return Literal(FALSE)

    def nil_lit(self, items):
        return Literal(NIL)

    def variable(self, items):
        return Variable(to_token(items[0]))

    def grouping(self, items):
        return Grouping(items[0])


def error_line(e: UnexpectedInput) -> int:
    line = getattr(e, 'line', None)
    return line if isinstance(line, int) and line > 0 else 1


def find_reserved_name(tree: Tree) -> Optional[LarkToken]:
    # Reserved words the grammar never mentions still lex as IDENTIFIER
    names = tree.scan_values(
        lambda v: isinstance(v, LarkToken) and v.type == 'IDENTIFIER' and str(v) in KEYWORDS)
    return min(names, key=lambda t: (t.line, t.column), default=None)


def parse_with_grammar(source: str, reporter: Optional[ErrorReporter] = None) -> List[Stmt]:
    """Parse Rox source with the LALR grammar.

    On a syntax error the error is reported, `reporter.had_error` is set and
    an empty program is returned.
    """
    if reporter is None:
        reporter = ErrorReporter()
    try:
        tree = ROX_PARSER.parse(source)
    except UnexpectedCharacters as e:
        if e.char == '"':
            reporter.error(error_line(e), 'Unterminated string.', ErrorKind.UNTERMINATED_STRING)
        else:
            reporter.error(error_line(e), 'Unexpected character.', ErrorKind.UNEXPECTED_CHARACTER)
        return []
    except UnexpectedToken as e:
        if e.token.type == '$END':
            where = ' at end'
        else:
            where = f" at '{e.token}'"
        expected = ', '.join(sorted(e.expected))
        reporter.error_at(error_line(e), where, f'Expect one of: {expected}.', ErrorKind.MISSING_TOKEN)
        return []
    except UnexpectedInput as e:
        reporter.error(error_line(e), 'Unexpected input.', ErrorKind.MISSING_TOKEN)
        return []
    reserved = find_reserved_name(tree)
    if reserved is not None:
        reporter.error_at(reserved.line, f" at '{reserved}'", 'Reserved word cannot be used here.',
                          ErrorKind.MISSING_TOKEN)
        return []
    return ASTTransformer().transform(tree)
