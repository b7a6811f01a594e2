import json

import pytest

from rox.ast_json import ast_from_obj, ast_to_obj, program_from_obj, program_to_obj
from rox.interpreter import Interpreter
from rox.parser import parse_program


def test_program_survives_json():
    source = 'var a = "s";\n{ a = -(1 + 2) * 3 >= 4 != !nil; }\nprint a;\nvar b;\nb;'
    statements = parse_program(source)
    data = json.loads(json.dumps(program_to_obj(statements)))
    assert program_from_obj(data) == statements


def test_loaded_program_runs_and_reports_original_lines(capsys):
    statements = parse_program('print 1;\n\nprint -"x";')
    loaded = program_from_obj(json.loads(json.dumps(program_to_obj(statements))))
    Interpreter().interpret(loaded)
    assert capsys.readouterr().out.split('\n')[:2] == [
        '1', "[line 3] Error at '-': Operand must be a number.",
    ]


def test_literal_encoding():
    [stmt] = parse_program('print "x";')
    obj = ast_to_obj(stmt)
    assert obj == {
        'type': 'Print',
        'expression': {'type': 'Literal', 'value': {'kind': 'String', 'value': 'x'}},
    }
    assert ast_from_obj(obj) == stmt


def test_unknown_node_type():
    with pytest.raises(ValueError):
        ast_from_obj({'type': 'While'})
    with pytest.raises(ValueError):
        program_from_obj({'type': 'Module', 'body': []})
