"""CLI entry point for the Rox interpreter.

Usage:
    python -m rox [-v|-vv|-vvv] [--grammar] [script]
    python -m rox --tokens <script>
    python -m rox --print-ast <script>
    python -m rox --emit-ast <script>
    python -m rox --ast <ast_json_file>

Without a script an interactive prompt is started. Global variables
persist between prompt lines; errors on one line do not end the session.

Exit status follows sysexits: 65 when the script has scan or parse
errors, 70 when a runtime error was reported.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .ast_json import program_from_obj, program_to_obj
from .ast_printer import print_ast
from .errors import ErrorReporter
from .grammar import parse_with_grammar
from .interpreter import Interpreter, run_program
from .parser import parse_program
from .scanner import scan

EX_DATAERR = 65
EX_SOFTWARE = 70


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def run_prompt(interpreter: Interpreter, use_grammar: bool = False):
    while True:
        try:
            line = input('> ')
        except EOFError:
            print()
            break
        run_program(line, interpreter, use_grammar=use_grammar)
        interpreter.reporter.reset()


def exit_status(reporter: ErrorReporter) -> int:
    if reporter.had_error:
        return EX_DATAERR
    if reporter.had_runtime_error:
        return EX_SOFTWARE
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog='rox', description="Rox language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--grammar', action='store_true', help='parse with the LALR grammar front end')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--tokens', action='store_true', help='print the token stream instead of running')
    group.add_argument('--print-ast', action='store_true', help='print the AST as s-expressions instead of running')
    group.add_argument('--emit-ast', metavar='ROX_FILE', help='emit AST JSON for the given .rox file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('script', nargs='?', help='Rox script to execute; omit for a prompt')
    args = parser.parse_args(argv)

    reporter = ErrorReporter()

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        source = read_source(program_file)
        statements = parse_with_grammar(source, reporter) if args.grammar else parse_program(source, reporter)
        if reporter.had_error:
            sys.exit(EX_DATAERR)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(program_to_obj(statements), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        data = json.loads(read_source(ast_path))
        interpreter = Interpreter(reporter=reporter, debug_level=args.v)
        try:
            interpreter.interpret(program_from_obj(data))
        finally:
            interpreter.close()
        sys.exit(exit_status(reporter))

    if args.script is None:
        if args.tokens or args.print_ast:
            parser.error('--tokens and --print-ast need a script')
        interpreter = Interpreter(reporter=reporter, debug_level=args.v)
        try:
            run_prompt(interpreter, args.grammar)
        finally:
            interpreter.close()
        return

    source = read_source(Path(args.script))

    if args.tokens:
        for token in scan(source, reporter):
            print(repr(token))
        sys.exit(exit_status(reporter))

    if args.print_ast:
        statements = parse_with_grammar(source, reporter) if args.grammar else parse_program(source, reporter)
        for stmt in statements:
            print(print_ast(stmt))
        sys.exit(exit_status(reporter))

    interpreter = Interpreter(reporter=reporter, debug_level=args.v)
    try:
        run_program(source, interpreter, use_grammar=args.grammar)
    finally:
        interpreter.close()
    sys.exit(exit_status(reporter))


if __name__ == '__main__':
    main()
