import io
import math

from rox.ast import Binary, Literal, Print
from rox.errors import ErrorKind, ErrorReporter
from rox.interpreter import Interpreter, divide, run_program
from rox.tokens import Token, TokenType
from rox.types import DoubleVal


def run(source: str):
    out = io.StringIO()
    reporter = ErrorReporter(stream=out)
    run_program(source, Interpreter(reporter=reporter, out=out))
    return out.getvalue().splitlines(), reporter


def test_left_associative_subtraction():
    lines, _ = run('print 8 - 4 - 2;')
    assert lines == ['2']


def test_shadowing_in_block():
    lines, _ = run('var a = "outer";\n{ var a = "inner"; print a; }\nprint a;')
    assert lines == ['inner', 'outer']


def test_assignment_reaches_outward():
    lines, _ = run('var a = "global";\n{ a = "changed"; }\nprint a;')
    assert lines == ['changed']


def test_type_errors_are_local():
    lines, reporter = run('var x = 1 + "s";\nprint 5;')
    assert lines == [
        "[line 1] Error at '+': Operands must be two numbers or two strings.",
        '5',
    ]
    assert reporter.kinds == [ErrorKind.INVALID_OPERAND]


def test_failed_declaration_does_not_define():
    lines, reporter = run('var x = -"a";\nprint x;')
    assert lines[1] == "[line 2] Error at 'x': Undefined variable 'x'."
    assert reporter.kinds == [ErrorKind.INVALID_OPERAND, ErrorKind.UNDEFINED_VARIABLE]


def test_truthiness():
    lines, _ = run('print !nil; print !0.0; print !""; print !false; print !"a";')
    assert lines == ['true', 'false', 'false', 'true', 'false']


def test_uninitialized_variable_reads_nil():
    lines, _ = run('var a; print a; a = 1; print a;')
    assert lines == ['nil', '1']


def test_assignment_is_an_expression():
    lines, _ = run('var a; var b; a = b = "x"; print a; print b; print a = 3;')
    assert lines == ['x', 'x', '3']


def test_assignment_never_declares():
    lines, reporter = run('{ fresh = 1; }\nprint "after";')
    assert lines == ["[line 1] Error at 'fresh': Undefined variable 'fresh'.", 'after']
    assert reporter.kinds == [ErrorKind.INVALID_ASSIGNMENT]


def test_block_scope_is_discarded():
    lines, reporter = run('{ var inner = 1; }\nprint inner;')
    assert lines == ["[line 2] Error at 'inner': Undefined variable 'inner'."]
    assert reporter.kinds == [ErrorKind.UNDEFINED_VARIABLE]


def test_runtime_error_in_block_restores_scope():
    interp = Interpreter(out=io.StringIO(), reporter=ErrorReporter(stream=io.StringIO()))
    run_program('var a = "global";\n{ var a = "local"; print -a; }', interp)
    assert interp.environment is interp.globals
    out = io.StringIO()
    interp.out = out
    run_program('print a;', interp)
    assert out.getvalue() == 'global\n'


def test_runtime_error_aborts_rest_of_block():
    lines, _ = run('{ print 1; print nil * 2; print 3; }\nprint 4;')
    assert lines == ['1', "[line 1] Error at '*': Operands must be numbers.", '4']


def test_operands_are_evaluated_left_to_right():
    # the left operand's error is the one reported
    lines, _ = run('print missing + -"x";')
    assert lines == ["[line 1] Error at 'missing': Undefined variable 'missing'."]


def test_arithmetic_and_comparison():
    lines, _ = run(
        'print 2 * 3 + 1; print 10 / 4; print 1 < 2; print 2 <= 2; print 3 > 4; print 3 >= 4;'
    )
    assert lines == ['7', '2.5', 'true', 'true', 'false', 'false']


def test_string_concatenation():
    lines, _ = run('var a = "foo"; print a + "bar";')
    assert lines == ['foobar']


def test_ordering_requires_numbers():
    lines, reporter = run('print "a" < "b";')
    assert lines == ["[line 1] Error at '<': Operands must be numbers."]
    assert reporter.kinds == [ErrorKind.INVALID_OPERAND]


def test_equality_across_types_is_never_an_error():
    lines, reporter = run('print 1 == "1"; print nil == false; print "a" != "a"; print true == true;')
    assert lines == ['false', 'false', 'false', 'true']
    assert not reporter.had_runtime_error


def test_division_by_zero_follows_ieee():
    lines, _ = run('print 1 / 0; print -1 / 0; print 0 / 0 == 0 / 0;')
    assert lines == ['inf', '-inf', 'false']
    assert math.isnan(divide(0.0, 0.0))
    assert divide(1.0, -0.0) == -math.inf


def test_syntax_error_prevents_execution():
    lines, reporter = run('print 1;\nprint 2')
    assert lines == ["[line 2] Error at end: Expect ';' after value."]
    assert reporter.had_error
    assert not reporter.had_runtime_error


def test_globals_persist_across_runs():
    out = io.StringIO()
    interp = Interpreter(out=out)
    run_program('var counter = 1;', interp)
    run_program('counter = counter + 1;', interp)
    run_program('print counter;', interp)
    assert out.getvalue() == '2\n'


def test_runs_hand_built_ast(capsys):
    plus = Token(TokenType.PLUS, '+', None, 1)
    Interpreter().interpret([Print(Binary(Literal(DoubleVal(1.0)), plus, Literal(DoubleVal(2.0))))])
    assert capsys.readouterr().out == '3\n'


def test_unknown_operator_is_a_runtime_error():
    comma = Token(TokenType.COMMA, ',', None, 7)
    reporter = ErrorReporter(stream=io.StringIO())
    Interpreter(reporter=reporter).interpret(
        [Print(Binary(Literal(DoubleVal(1.0)), comma, Literal(DoubleVal(2.0))))]
    )
    assert reporter.kinds == [ErrorKind.INVALID_OPERAND]
    assert reporter.diagnostics[0].line == 7


def test_debug_log(tmp_path):
    log = tmp_path / 'debug.txt'
    interp = Interpreter(out=io.StringIO(), debug_level=3, debug_file=str(log))
    run_program('var a = 1; { a = 2; }', interp)
    interp.close()
    text = log.read_text(encoding='utf-8')
    assert 'declare a = 1' in text
    assert 'assign a = 2' in text
    assert 'enter scope depth 1' in text
    assert 'leave scope depth 1' in text


def test_run_program_sends_diagnostics_to_given_reporter():
    out = io.StringIO()
    reporter = ErrorReporter(stream=out)
    returned = run_program('var class = 1; print class;', Interpreter(out=out), reporter)
    assert returned is reporter
    assert reporter.had_error
    assert out.getvalue().startswith("[line 1] Error at 'class': Expect variable name.")


def test_long_operator_chain_is_a_runtime_error():
    lines, reporter = run('print ' + ' + '.join(['1'] * 5000) + ';\nprint "after";')
    assert reporter.kinds == [ErrorKind.TOO_DEEP]
    assert lines == ["[line 1] Error at '+': Too much nesting.", 'after']
