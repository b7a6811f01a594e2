from pathlib import Path

from rox.interpreter import Interpreter
from rox.parser import parse_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_2_nested_shadowing(capsys):
    with open(EXAMPLES / 'program_2.rox', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.interpret(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == [
        'inner a', 'outer b', 'global c',
        'outer a', 'outer b', 'global c',
        'global a', 'global b', 'global c',
    ]
