from rox.errors import ErrorKind, ErrorReporter
from rox.scanner import scan
from rox.tokens import Token, TokenType
from rox.types import DoubleVal, StringVal


def types_of(tokens):
    return [t.type for t in tokens]


def test_arithmetic_expression_tokens():
    tokens = scan('1 + 2 * (3 - 4)')
    assert types_of(tokens) == [
        TokenType.NUMBER, TokenType.PLUS, TokenType.NUMBER, TokenType.STAR,
        TokenType.LEFT_PAREN, TokenType.NUMBER, TokenType.MINUS, TokenType.NUMBER,
        TokenType.RIGHT_PAREN, TokenType.EOF,
    ]
    assert [t.lexeme for t in tokens] == ['1', '+', '2', '*', '(', '3', '-', '4', ')', '']
    assert tokens[0].literal == DoubleVal(1.0)
    assert tokens[7].literal == DoubleVal(4.0)


def test_two_char_operators_use_maximal_munch():
    tokens = scan('! != = == < <= > >=')
    assert types_of(tokens) == [
        TokenType.BANG, TokenType.BANG_EQUAL, TokenType.EQUAL, TokenType.EQUAL_EQUAL,
        TokenType.LESS, TokenType.LESS_EQUAL, TokenType.GREATER, TokenType.GREATER_EQUAL,
        TokenType.EOF,
    ]
    # no whitespace: "!==" is "!=" then "="
    assert types_of(scan('!==')) == [TokenType.BANG_EQUAL, TokenType.EQUAL, TokenType.EOF]


def test_comments_and_line_counting():
    tokens = scan('var a; // trailing / comment\n// full line\nprint a;')
    assert types_of(tokens) == [
        TokenType.VAR, TokenType.IDENTIFIER, TokenType.SEMICOLON,
        TokenType.PRINT, TokenType.IDENTIFIER, TokenType.SEMICOLON, TokenType.EOF,
    ]
    assert [t.line for t in tokens] == [1, 1, 1, 3, 3, 3, 3]


def test_slash_alone_is_division():
    assert types_of(scan('6 / 3')) == [TokenType.NUMBER, TokenType.SLASH, TokenType.NUMBER, TokenType.EOF]


def test_string_literal_keeps_text_without_quotes():
    tokens = scan('"hello world"')
    assert tokens[0] == Token(TokenType.STRING, '"hello world"', StringVal('hello world'), 1)


def test_multiline_string_counts_lines():
    tokens = scan('"a\nb"\nx')
    assert tokens[0].literal == StringVal('a\nb')
    assert tokens[0].line == 2
    assert tokens[1].line == 3


def test_number_literals():
    tokens = scan('123 45.67 8.')
    assert tokens[0].literal == DoubleVal(123.0)
    assert tokens[1].literal == DoubleVal(45.67)
    # a trailing dot is not part of the number
    assert types_of(tokens)[2:] == [TokenType.NUMBER, TokenType.DOT, TokenType.EOF]
    assert tokens[2].lexeme == '8'


def test_keywords_and_identifiers():
    tokens = scan('var variable _x1 nil true false orchid or')
    assert types_of(tokens) == [
        TokenType.VAR, TokenType.IDENTIFIER, TokenType.IDENTIFIER, TokenType.NIL,
        TokenType.TRUE, TokenType.FALSE, TokenType.IDENTIFIER, TokenType.OR, TokenType.EOF,
    ]


def test_unterminated_string_reports_and_emits_no_token(capsys):
    reporter = ErrorReporter()
    tokens = scan('"abc', reporter)
    assert types_of(tokens) == [TokenType.EOF]
    assert reporter.had_error
    assert reporter.kinds == [ErrorKind.UNTERMINATED_STRING]
    assert capsys.readouterr().out.strip() == '[line 1] Error: Unterminated string.'


def test_unexpected_character_does_not_stop_scanning(capsys):
    reporter = ErrorReporter()
    tokens = scan('1 @ 2\n#', reporter)
    assert types_of(tokens) == [TokenType.NUMBER, TokenType.NUMBER, TokenType.EOF]
    assert reporter.kinds == [ErrorKind.UNEXPECTED_CHARACTER, ErrorKind.UNEXPECTED_CHARACTER]
    assert capsys.readouterr().out.strip().split('\n') == [
        '[line 1] Error: Unexpected character.',
        '[line 2] Error: Unexpected character.',
    ]


def test_empty_source_is_just_eof():
    tokens = scan('')
    assert tokens == [Token(TokenType.EOF, '', None, 1)]


def test_lines_never_decrease():
    tokens = scan('a\n\nb "x\ny" c\n')
    lines = [t.line for t in tokens]
    assert lines == sorted(lines)
    assert sum(1 for t in tokens if t.type == TokenType.EOF) == 1
