# Rox language package
# This package provides a scanner, parser and tree-walking interpreter for Rox.
from .interpreter import run_program, Interpreter
from .parser import parse_program, Parser
from .scanner import scan, Scanner
from .errors import ErrorReporter, ErrorKind, RoxError

__all__ = [
    'run_program',
    'Interpreter',
    'parse_program',
    'Parser',
    'scan',
    'Scanner',
    'ErrorReporter',
    'ErrorKind',
    'RoxError',
]
