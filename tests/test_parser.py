import logging
from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st
from hypothesis.strategies import composite

from monkey.monkey_ast import (
    ExpressionStatement,
    Identifier,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
)
from monkey.monkey_constants import TokenType, keywords
from monkey.monkey_lexer import CharacterStream, Lexer
from monkey.monkey_parser import Parser, parse_int64, parse_program


def make_parser(source: str, grammar: str = "full") -> Parser:
    return Parser(Lexer(CharacterStream(source)), grammar=grammar)


def parse_ok(source: str, grammar: str = "full") -> Program:
    program, errors = parse_program(source, grammar=grammar)
    assert errors == []
    return program


def single_expression(source: str) -> Any:
    program = parse_ok(source)
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expression


# Statements


def test_parser_primes_two_tokens() -> None:
    parser = make_parser("let x")
    assert parser.current_token.type is TokenType.LET
    assert parser.lookahead_token.type is TokenType.IDENT


@pytest.mark.parametrize(
    "source,name,value",
    [
        ("let x = 5;", "x", "5"),
        ("let y = true_value;", "y", "true_value"),
        ("let foobar = y", "foobar", "y"),
        ("let z = 1 + 2 * 3;", "z", "(1 + (2 * 3))"),
    ],
)
def test_let_statements_full(source: str, name: str, value: str) -> None:
    program = parse_ok(source)
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, LetStatement)
    assert stmt.token_literal() == "let"
    assert stmt.name.value == name
    assert stmt.name.render() == name
    assert stmt.value is not None
    assert stmt.value.render() == value


def test_let_statements_minimal_skip_value() -> None:
    program = parse_ok("let x = 5;\nlet y = 10;\nlet foobar = 838383;", "minimal")
    assert [s.name.value for s in program.statements] == ["x", "y", "foobar"]  # type: ignore[union-attr]
    assert all(isinstance(s, LetStatement) for s in program.statements)
    assert all(s.value is None for s in program.statements)  # type: ignore[union-attr]
    assert program.render() == "let x = ;let y = ;let foobar = ;"


@pytest.mark.parametrize("grammar", ["minimal", "full"])
def test_let_missing_identifier(grammar: str) -> None:
    parser = make_parser("let = 5;", grammar)
    parser.parse_program()
    assert parser.errors[0] == "expected next token to be IDENT, got = instead"


@pytest.mark.parametrize("grammar", ["minimal", "full"])
def test_let_missing_assign(grammar: str) -> None:
    parser = make_parser("let x 5;", grammar)
    program = parser.parse_program()
    assert parser.errors[0] == "expected next token to be =, got INT instead"
    assert not any(isinstance(s, LetStatement) for s in program.statements)


def test_let_error_messages_for_all_bad_lets() -> None:
    parser = make_parser("let x 5;\nlet = 10;\nlet 838383;", "minimal")
    parser.parse_program()
    errors = parser.errors
    assert "expected next token to be =, got INT instead" in errors
    assert "expected next token to be IDENT, got = instead" in errors
    assert "expected next token to be IDENT, got INT instead" in errors


def test_return_statements_full() -> None:
    program = parse_ok("return 5;\nreturn 10;\nreturn a + b;")
    assert len(program.statements) == 3
    values = []
    for stmt in program.statements:
        assert isinstance(stmt, ReturnStatement)
        assert stmt.token_literal() == "return"
        assert stmt.return_value is not None
        values.append(stmt.return_value.render())
    assert values == ["5", "10", "(a + b)"]


def test_return_statements_minimal_skip_value() -> None:
    program = parse_ok("return 5;\nreturn 993322;", "minimal")
    assert len(program.statements) == 2
    assert all(isinstance(s, ReturnStatement) for s in program.statements)
    assert all(s.return_value is None for s in program.statements)  # type: ignore[union-attr]


def test_bare_return_full() -> None:
    program = parse_ok("return;")
    stmt = program.statements[0]
    assert isinstance(stmt, ReturnStatement)
    assert stmt.return_value is None
    assert program.render() == "return ;"


def test_return_without_value_at_eof_full() -> None:
    program, errors = parse_program("return")
    assert errors == ["no prefix parse function for EOF found"]
    assert len(program.statements) == 1


@pytest.mark.parametrize(
    "source", ["let x = 5", "let x =", "return 5", "return", "let x = 1 + 2 +"]
)
def test_missing_semicolon_at_eof_terminates_minimal(source: str) -> None:
    program, errors = parse_program(source, grammar="minimal")
    assert "expected next token to be ;, got EOF instead" in errors
    assert len(program.statements) == 1


def test_missing_semicolon_is_optional_full() -> None:
    program = parse_ok("let x = 5")
    assert program.render() == "let x = 5;"


def test_failed_let_value_keeps_statement() -> None:
    program, errors = parse_program("let x = ;")
    assert errors == ["no prefix parse function for ; found"]
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, LetStatement)
    assert stmt.name.value == "x"
    assert stmt.value is None


def test_unknown_grammar_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown grammar"):
        make_parser("x", grammar="chapter9")


def test_statements_keep_source_order() -> None:
    program = parse_ok("let a = 1; b; return c; 4")
    assert [type(s) for s in program.statements] == [
        LetStatement,
        ExpressionStatement,
        ReturnStatement,
        ExpressionStatement,
    ]
    assert program.token_literal() == "let"


# Expressions


def test_identifier_expression() -> None:
    expr = single_expression("foobar;")
    assert isinstance(expr, Identifier)
    assert expr.value == "foobar"
    assert expr.token_literal() == "foobar"


def test_integer_literal_expression() -> None:
    program = parse_ok("5")
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement)
    assert isinstance(stmt.expression, IntegerLiteral)
    assert stmt.expression.value == 5
    assert stmt.expression.token_literal() == "5"


@pytest.mark.parametrize(
    "literal,value",
    [
        ("0", 0),
        ("42", 42),
        ("010", 8),
        ("9223372036854775807", 2**63 - 1),
        ("0x1F", 31),
        ("0b101", 5),
        ("0o17", 15),
    ],
)
def test_parse_int64(literal: str, value: int) -> None:
    assert parse_int64(literal) == value


@pytest.mark.parametrize("literal", ["9223372036854775808", "09", "0x", "abc"])
def test_parse_int64_rejects(literal: str) -> None:
    with pytest.raises(ValueError):
        parse_int64(literal)


@pytest.mark.parametrize("literal", ["9223372036854775808", "08"])
def test_integer_literal_conversion_error(literal: str) -> None:
    program, errors = parse_program(f"{literal};")
    assert errors == [f'could not parse "{literal}" as integer']
    assert program.statements == ()


@pytest.mark.parametrize(
    "source,operator,operand",
    [("!5;", "!", "5"), ("-15;", "-", "15"), ("!foo", "!", "foo")],
)
def test_prefix_expressions(source: str, operator: str, operand: str) -> None:
    expr = single_expression(source)
    assert isinstance(expr, PrefixExpression)
    assert expr.operator == operator
    assert expr.token_literal() == operator
    assert expr.right.render() == operand


@pytest.mark.parametrize("operator", ["+", "-", "*", "/", ">", "<", "==", "!="])
def test_infix_expressions(operator: str) -> None:
    expr = single_expression(f"5 {operator} 6;")
    assert isinstance(expr, InfixExpression)
    assert expr.operator == operator
    assert expr.token_literal() == operator
    assert isinstance(expr.left, IntegerLiteral) and expr.left.value == 5
    assert isinstance(expr.right, IntegerLiteral) and expr.right.value == 6


@pytest.mark.parametrize(
    "source,expected",
    [
        ("-a * b", "((-a) * b)"),
        ("!-a", "(!(-a))"),
        ("a + b + c", "((a + b) + c)"),
        ("a + b - c", "((a + b) - c)"),
        ("a * b * c", "((a * b) * c)"),
        ("a * b / c", "((a * b) / c)"),
        ("a + b / c", "(a + (b / c))"),
        ("a + b * c", "(a + (b * c))"),
        ("a + b * c + d / e - f", "(((a + (b * c)) + (d / e)) - f)"),
        ("3 + 4; -5 * 5", "(3 + 4)((-5) * 5)"),
        ("5 > 4 == 3 < 4", "((5 > 4) == (3 < 4))"),
        ("5 < 4 != 3 > 4", "((5 < 4) != (3 > 4))"),
        ("3 + 4 * 5 == 3 * 1 + 4 * 5", "((3 + (4 * 5)) == ((3 * 1) + (4 * 5)))"),
        ("1 + (2 + 3) + 4", "((1 + (2 + 3)) + 4)"),
        ("(5 + 5) * 2", "((5 + 5) * 2)"),
        ("2 / (5 + 5)", "(2 / (5 + 5))"),
        ("-(5 + 5)", "(-(5 + 5))"),
        ("- -a", "(-(-a))"),
    ],
)
def test_operator_precedence(source: str, expected: str) -> None:
    assert parse_ok(source).render() == expected


def test_no_prefix_parse_function() -> None:
    program, errors = parse_program("!true")
    assert program.statements == ()
    assert errors == ["no prefix parse function for TRUE found"]


@pytest.mark.parametrize(
    "source,kind",
    [("+5", "+"), (")", ")"), ("@", "ILLEGAL"), ("fn", "FUNCTION"), ("-", "EOF")],
)
def test_grammar_gap_diagnostics(source: str, kind: str) -> None:
    _, errors = parse_program(source)
    assert errors[0] == f"no prefix parse function for {kind} found"


def test_missing_right_operand() -> None:
    program, errors = parse_program("5 + ;")
    assert program.statements == ()
    assert errors == ["no prefix parse function for ; found"]


def test_unclosed_group() -> None:
    program, errors = parse_program("(1 + 2")
    assert program.statements == ()
    assert errors == ["expected next token to be ), got EOF instead"]


def test_unregistered_lookahead_ends_expression() -> None:
    program, errors = parse_program("a b")
    assert errors == []
    assert [s.render() for s in program.statements] == ["a", "b"]


def test_recovery_continues_after_bad_statement() -> None:
    program, errors = parse_program("let = 1; let y = 2;")
    assert errors[0] == "expected next token to be IDENT, got = instead"
    lets = [s for s in program.statements if isinstance(s, LetStatement)]
    assert [s.name.value for s in lets] == ["y"]


def test_errors_returns_copy() -> None:
    parser = make_parser("+")
    parser.parse_program()
    errs = parser.errors
    errs.clear()
    assert parser.errors == ["no prefix parse function for + found"]
    assert parser.diagnostics == parser.errors


def test_diagnostics_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="monkey.monkey_parser"):
        parse_program("!true")
    assert "no prefix parse function for TRUE found" in caplog.text


# Properties

IDENTS = st.from_regex(r"[a-z_]{1,6}", fullmatch=True).filter(
    lambda s: s not in keywords
)
LEAVES = IDENTS | st.integers(min_value=0, max_value=10**6).map(str)
OPERATORS = ["+", "-", "*", "/", "<", ">", "==", "!="]


@composite  # type: ignore[misc]
def expression_source(draw: Any, depth: int = 3) -> str:
    if depth == 0 or draw(st.booleans()):
        return draw(LEAVES)
    shape = draw(st.sampled_from(["prefix", "infix", "group"]))
    if shape == "prefix":
        op = draw(st.sampled_from(["-", "!"]))
        return f"{op}{draw(expression_source(depth - 1))}"
    if shape == "group":
        return f"({draw(expression_source(depth - 1))})"
    op = draw(st.sampled_from(OPERATORS))
    left = draw(expression_source(depth - 1))
    right = draw(expression_source(depth - 1))
    return f"{left} {op} {right}"


@given(expression_source())  # type: ignore[misc]
def test_render_reparse_is_stable(source: str) -> None:
    rendered = parse_ok(source).render()
    assert parse_ok(rendered).render() == rendered


@given(IDENTS, expression_source(), expression_source())  # type: ignore[misc]
def test_let_and_return_render_is_stable(name: str, value: str, ret: str) -> None:
    program = parse_ok(f"let {name} = {value}; return {ret};")
    rendered = program.render()
    reparsed = parse_ok(rendered)
    assert reparsed.render() == rendered
    assert reparsed == parse_ok(reparsed.render())


@given(
    st.sampled_from([["+", "-"], ["*", "/"], ["<", ">"], ["==", "!="]]),
    st.lists(IDENTS, min_size=2, max_size=7),
    st.data(),
)  # type: ignore[misc]
def test_same_precedence_is_left_associative(
    level: list[str], names: list[str], data: Any
) -> None:
    ops = [data.draw(st.sampled_from(level)) for _ in names[1:]]
    source = names[0] + "".join(f" {op} {n}" for op, n in zip(ops, names[1:]))
    expected = names[0]
    for op, n in zip(ops, names[1:]):
        expected = f"({expected} {op} {n})"
    assert parse_ok(source).render() == expected


@given(st.text(alphabet="ab12+-*/<>=!;(){}@ \n", max_size=60))  # type: ignore[misc]
def test_parser_never_raises(source: str) -> None:
    for grammar in ("minimal", "full"):
        program, errors = parse_program(source, grammar=grammar)
        assert isinstance(program, Program)
        assert all(isinstance(e, str) for e in errors)
