from __future__ import annotations

import enum
import sys
from dataclasses import dataclass
from typing import List, Optional, TextIO

from .tokens import Token, TokenType


class ErrorKind(enum.Enum):
    # lexical
    UNEXPECTED_CHARACTER = 'unexpected-character'
    UNTERMINATED_STRING = 'unterminated-string'
    # syntactic
    MISSING_TOKEN = 'missing-token'
    UNMATCHED_PRIMARY = 'unmatched-primary'
    INVALID_ASSIGNMENT_TARGET = 'invalid-assignment-target'
    # runtime
    INVALID_OPERAND = 'invalid-operand'
    UNDEFINED_VARIABLE = 'undefined-variable'
    INVALID_ASSIGNMENT = 'invalid-assignment'
    # limits
    TOO_DEEP = 'too-deep'


class RoxError(Exception):
    """Base class for errors raised while processing a Rox program."""
    def __init__(self, kind: ErrorKind, message: str, token: Optional[Token] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.token = token


class ParseError(RoxError):
    """Unwinds the parser out of one production; the caller resynchronizes."""


class RoxRuntimeError(RoxError):
    """Raised during evaluation; aborts the current top-level statement."""
    def __init__(self, kind: ErrorKind, token: Token, message: str):
        super().__init__(kind, message, token)


def where_of(token: Token) -> str:
    if token.type == TokenType.EOF:
        return ' at end'
    return f" at '{token.lexeme}'"


@dataclass(frozen=True)
class Diagnostic:
    line: int
    where: str
    message: str
    kind: ErrorKind

    def __str__(self) -> str:
        return f"[line {self.line}] Error{self.where}: {self.message}"


class ErrorReporter:
    """Collects diagnostics from every stage of the pipeline.

    Each diagnostic is recorded in `diagnostics` and written as one line
    to `stream` (the current `sys.stdout` when no stream is given).
    `had_error` tracks scan and parse errors, `had_runtime_error` tracks
    evaluation errors.
    """
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.diagnostics: List[Diagnostic] = []
        self.had_error = False
        self.had_runtime_error = False

    def error(self, line: int, message: str, kind: ErrorKind):
        self.error_at(line, '', message, kind)

    def token_error(self, token: Token, message: str, kind: ErrorKind):
        self.error_at(token.line, where_of(token), message, kind)

    def error_at(self, line: int, where: str, message: str, kind: ErrorKind):
        self.report(Diagnostic(line, where, message, kind))
        self.had_error = True

    def runtime_error(self, err: RoxRuntimeError):
        token = err.token
        self.report(Diagnostic(token.line, where_of(token), err.message, err.kind))
        self.had_runtime_error = True

    def report(self, diagnostic: Diagnostic):
        self.diagnostics.append(diagnostic)
        print(str(diagnostic), file=self.stream if self.stream is not None else sys.stdout)

    def reset(self):
        self.had_error = False
        self.had_runtime_error = False

    @property
    def kinds(self) -> List[ErrorKind]:
        return [d.kind for d in self.diagnostics]
