"""Scanner for the Rox language.

Turns source text into a list of tokens in a single left-to-right pass.
Bad characters and unterminated strings are reported to the
`ErrorReporter` and skipped, so one mistake never hides the rest of the
file. The returned list always ends with a single EOF token.
"""

from __future__ import annotations

from typing import List, Optional

from .errors import ErrorKind, ErrorReporter
from .tokens import KEYWORDS, Token, TokenType
from .types import DoubleVal, StringVal, Value


SINGLE_CHAR_TOKENS = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
    '-': TokenType.MINUS,
    '+': TokenType.PLUS,
    ';': TokenType.SEMICOLON,
    '*': TokenType.STAR,
}

# one-char operator -> (type alone, type when followed by '=')
EQUAL_SUFFIXED_TOKENS = {
    '!': (TokenType.BANG, TokenType.BANG_EQUAL),
    '=': (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
    '<': (TokenType.LESS, TokenType.LESS_EQUAL),
    '>': (TokenType.GREATER, TokenType.GREATER_EQUAL),
}


def is_digit(c: str) -> bool:
    return '0' <= c <= '9'


def is_alpha(c: str) -> bool:
    return ('a' <= c <= 'z') or ('A' <= c <= 'Z') or c == '_'


def is_alpha_numeric(c: str) -> bool:
    return is_alpha(c) or is_digit(c)


class Scanner:
    def __init__(self, source: str, reporter: Optional[ErrorReporter] = None):
        self.source = source
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.tokens: List[Token] = []
        self.start = 0
        self.current = 0
        self.line = 1

    def scan_tokens(self) -> List[Token]:
        while not self.is_at_end():
            self.start = self.current
            self.scan_token()
        self.tokens.append(Token(TokenType.EOF, '', None, self.line))
        return self.tokens

    def scan_token(self):
        c = self.advance()
        if c in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[c])
        elif c in EQUAL_SUFFIXED_TOKENS:
            alone, with_equal = EQUAL_SUFFIXED_TOKENS[c]
            self.add_token(with_equal if self.match('=') else alone)
        elif c == '/':
            if self.match('/'):
                # A comment goes until the end of the line.
                while self.peek() != '\n' and not self.is_at_end():
                    self.advance()
            else:
                self.add_token(TokenType.SLASH)
        elif c in (' ', '\r', '\t'):
            pass
        elif c == '\n':
            self.line += 1
        elif c == '"':
            self.string()
        elif is_digit(c):
            self.number()
        elif is_alpha(c):
            self.identifier()
        else:
            self.reporter.error(self.line, 'Unexpected character.', ErrorKind.UNEXPECTED_CHARACTER)

    def string(self):
        while self.peek() != '"' and not self.is_at_end():
            if self.peek() == '\n':
                self.line += 1
            self.advance()

        if self.is_at_end():
            self.reporter.error(self.line, 'Unterminated string.', ErrorKind.UNTERMINATED_STRING)
            return

        # The closing ".
        self.advance()
        self.add_token(TokenType.STRING, StringVal(self.source[self.start + 1:self.current - 1]))

    def number(self):
        while is_digit(self.peek()):
            self.advance()

        # Look for a fractional part.
        if self.peek() == '.' and is_digit(self.peek_next()):
            self.advance()
            while is_digit(self.peek()):
                self.advance()

        self.add_token(TokenType.NUMBER, DoubleVal(float(self.source[self.start:self.current])))

    def identifier(self):
        while is_alpha_numeric(self.peek()):
            self.advance()
        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def match(self, expected: str) -> bool:
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self) -> str:
        if self.is_at_end():
            return '\0'
        return self.source[self.current]

    def peek_next(self) -> str:
        if self.current + 1 >= len(self.source):
            return '\0'
        return self.source[self.current + 1]

    def advance(self) -> str:
        c = self.source[self.current]
        self.current += 1
        return c

    def is_at_end(self) -> bool:
        return self.current >= len(self.source)

    def add_token(self, token_type: TokenType, literal: Optional[Value] = None):
        text = self.source[self.start:self.current]
        self.tokens.append(Token(token_type, text, literal, self.line))


def scan(source: str, reporter: Optional[ErrorReporter] = None) -> List[Token]:
    """Scan `source` into tokens, reporting lexical errors to `reporter`."""
    return Scanner(source, reporter).scan_tokens()
