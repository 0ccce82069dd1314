"""
Monkey Language Parser

Parses a Monkey token stream into a `Program` abstract syntax tree using
operator-precedence (Pratt) parsing.

Supported Constructs
--------------------
- Statements:
    * `let <ident> = <expr>;`
    * `return <expr>;`
    * Bare expressions used as statements, e.g. `x + 1;` (the `;` is optional)

- Expressions:
    * Identifiers and integer literals (`0x`/`0o`/`0b` and leading-zero octal accepted)
    * Prefix operators `!` and `-`
    * Infix operators `== != < > + - * /`, left-associative
    * Parenthesized groups

Grammar Variants
----------------
`minimal`
    `let` and `return` skip every token up to the terminating `;` without
    building a value expression (`value` is None).
`full` (default)
    `let` and `return` parse their value with the expression engine; the
    trailing `;` is optional.

Parser Behavior
---------------
- Pulls tokens from the lexer on demand, keeping a current token and one
  token of lookahead.
- Never raises on malformed input. Problems are appended to `errors` in the
  order they are found and the offending statement is dropped or left
  partially filled; parsing resumes at the next token.
- Terminates on every input: each loop either advances or stops at EOF.

Entry Points
------------
- `Parser.parse_program()`: Parse the whole token stream into a `Program`.
- `Parser.errors`: Diagnostics recorded so far.
- `parse_program(source)`: Convenience wrapper returning `(Program, errors)`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Literal

from monkey.monkey_ast import (
    Expression,
    ExpressionStatement,
    Identifier,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
)
from monkey.monkey_constants import Precedence, TokenType, precedences
from monkey.monkey_lexer import CharacterStream, Lexer, Token

logger = logging.getLogger(__name__)

Grammar = Literal["minimal", "full"]
GRAMMARS: tuple[str, ...] = ("minimal", "full")
DEFAULT_GRAMMAR: Grammar = "full"

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

PrefixParseFn = Callable[[], "Expression | None"]
InfixParseFn = Callable[["Expression"], "Expression | None"]


def parse_int64(literal: str) -> int:
    """Converts integer literal text, honoring its base prefix.

    `0x`, `0o` and `0b` select hex, octal and binary; any other literal with
    a leading zero is octal; everything else is decimal.

    Raises:
        ValueError: If the text is not a valid integer or does not fit in a
            signed 64-bit value.
    """
    text = literal.lower()
    if text.startswith(("0x", "0o", "0b")):
        value = int(text, 0)
    elif len(text) > 1 and text.startswith("0"):
        value = int(text, 8)
    else:
        value = int(text, 10)
    if not INT64_MIN <= value <= INT64_MAX:
        raise ValueError(f"{literal!r} is out of range for a 64-bit integer")
    return value


class Parser:
    """
    Monkey Parser Class

    Builds a `Program` from the tokens handed out by a `Lexer`.

    Attributes
    ----------
    lexer : Lexer
        Token source; drawn from one token at a time.
    grammar : str
        Either "minimal" or "full"; controls how `let`/`return` values are read.
    current_token : Token
        The token under examination.
    lookahead_token : Token
        The token right after `current_token`.
    prefix_parse_fns : dict[TokenType, PrefixParseFn]
        Rules for tokens that can begin an expression.
    infix_parse_fns : dict[TokenType, InfixParseFn]
        Rules for tokens that can continue an expression as a binary operator.

    Raises
    ------
    ValueError
        If `grammar` is not one of `GRAMMARS`.
    """

    def __init__(self, lexer: Lexer, grammar: str = DEFAULT_GRAMMAR) -> None:
        if grammar not in GRAMMARS:
            raise ValueError(
                f"Unknown grammar {grammar!r}; expected one of {', '.join(GRAMMARS)}"
            )
        self.lexer = lexer
        self.grammar = grammar
        self._errors: list[str] = []

        self.prefix_parse_fns: dict[TokenType, PrefixParseFn] = {}
        self.register_prefix(TokenType.IDENT, self.parse_identifier)
        self.register_prefix(TokenType.INT, self.parse_integer_literal)
        self.register_prefix(TokenType.BANG, self.parse_prefix_expression)
        self.register_prefix(TokenType.MINUS, self.parse_prefix_expression)
        self.register_prefix(TokenType.LPAREN, self.parse_grouped_expression)

        self.infix_parse_fns: dict[TokenType, InfixParseFn] = {}
        for kind in precedences:
            self.register_infix(kind, self.parse_infix_expression)

        # Prime both buffered tokens.
        self.current_token: Token = Token(TokenType.EOF, "")
        self.lookahead_token: Token = Token(TokenType.EOF, "")
        self.next_token()
        self.next_token()

    # Token buffer

    def next_token(self) -> None:
        self.current_token, self.lookahead_token = (
            self.lookahead_token,
            self.lexer.next_token(),
        )

    def current_token_is(self, kind: TokenType) -> bool:
        return self.current_token.type is kind

    def lookahead_token_is(self, kind: TokenType) -> bool:
        return self.lookahead_token.type is kind

    def expect_lookahead(self, kind: TokenType) -> bool:
        """Advances if the lookahead token is `kind`; records a diagnostic otherwise."""
        if self.lookahead_token_is(kind):
            self.next_token()
            return True
        self.lookahead_error(kind)
        return False

    def lookahead_precedence(self) -> Precedence:
        return precedences.get(self.lookahead_token.type, Precedence.LOWEST)

    def current_precedence(self) -> Precedence:
        return precedences.get(self.current_token.type, Precedence.LOWEST)

    # Diagnostics

    @property
    def errors(self) -> list[str]:
        """Diagnostics in the order they were recorded (a copy)."""
        return list(self._errors)

    diagnostics = errors

    def add_error(self, msg: str) -> None:
        logger.debug("parse error: %s", msg)
        self._errors.append(msg)

    def lookahead_error(self, kind: TokenType) -> None:
        self.add_error(
            f"expected next token to be {kind}, got {self.lookahead_token.type} instead"
        )

    def no_prefix_parse_fn_error(self, kind: TokenType) -> None:
        self.add_error(f"no prefix parse function for {kind} found")

    # Rule tables

    def register_prefix(self, kind: TokenType, fn: PrefixParseFn) -> None:
        self.prefix_parse_fns[kind] = fn

    def register_infix(self, kind: TokenType, fn: InfixParseFn) -> None:
        self.infix_parse_fns[kind] = fn

    # Statements

    def parse_program(self) -> Program:
        """Parse statements until EOF and return the root `Program`."""
        statements: list[Statement] = []
        while not self.current_token_is(TokenType.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.next_token()
        return Program(tuple(statements))

    def parse_statement(self) -> Statement | None:
        if self.current_token_is(TokenType.LET):
            return self.parse_let_statement()
        if self.current_token_is(TokenType.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def skip_to_semicolon(self) -> None:
        """Advances to the next `;`, stopping (with a diagnostic) at EOF."""
        while not self.current_token_is(TokenType.SEMICOLON):
            if self.lookahead_token_is(TokenType.EOF):
                self.lookahead_error(TokenType.SEMICOLON)
                return
            self.next_token()

    def skip_optional_semicolon(self) -> None:
        if self.lookahead_token_is(TokenType.SEMICOLON):
            self.next_token()

    def parse_let_statement(self) -> LetStatement | None:
        let_tok = self.current_token
        if not self.expect_lookahead(TokenType.IDENT):
            return None
        name = Identifier(self.current_token, self.current_token.literal)
        if not self.expect_lookahead(TokenType.ASSIGN):
            return None

        if self.grammar == "minimal":
            self.skip_to_semicolon()
            return LetStatement(let_tok, name)

        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)
        self.skip_optional_semicolon()
        return LetStatement(let_tok, name, value)

    def parse_return_statement(self) -> ReturnStatement:
        return_tok = self.current_token
        self.next_token()

        if self.grammar == "minimal":
            self.skip_to_semicolon()
            return ReturnStatement(return_tok)

        if self.current_token_is(TokenType.SEMICOLON):
            return ReturnStatement(return_tok)
        value = self.parse_expression(Precedence.LOWEST)
        self.skip_optional_semicolon()
        return ReturnStatement(return_tok, value)

    def parse_expression_statement(self) -> ExpressionStatement | None:
        first_tok = self.current_token
        expression = self.parse_expression(Precedence.LOWEST)
        self.skip_optional_semicolon()
        if expression is None:
            return None
        return ExpressionStatement(first_tok, expression)

    # Expressions

    def parse_expression(self, precedence: Precedence) -> Expression | None:
        """Pratt loop: parse a prefix, then fold in tighter-binding infix operators."""
        prefix = self.prefix_parse_fns.get(self.current_token.type)
        if prefix is None:
            self.no_prefix_parse_fn_error(self.current_token.type)
            return None
        left = prefix()

        while (
            left is not None
            and not self.lookahead_token_is(TokenType.SEMICOLON)
            and precedence < self.lookahead_precedence()
        ):
            infix = self.infix_parse_fns.get(self.lookahead_token.type)
            if infix is None:
                return left
            self.next_token()
            left = infix(left)

        return left

    def parse_identifier(self) -> Expression:
        return Identifier(self.current_token, self.current_token.literal)

    def parse_integer_literal(self) -> Expression | None:
        tok = self.current_token
        try:
            value = parse_int64(tok.literal)
        except ValueError:
            self.add_error(f'could not parse "{tok.literal}" as integer')
            return None
        return IntegerLiteral(tok, value)

    def parse_prefix_expression(self) -> Expression | None:
        op_tok = self.current_token
        self.next_token()
        right = self.parse_expression(Precedence.PREFIX)
        if right is None:
            return None
        return PrefixExpression(op_tok, op_tok.literal, right)

    def parse_infix_expression(self, left: Expression) -> Expression | None:
        op_tok = self.current_token
        precedence = self.current_precedence()
        self.next_token()
        right = self.parse_expression(precedence)
        if right is None:
            return None
        return InfixExpression(op_tok, left, op_tok.literal, right)

    def parse_grouped_expression(self) -> Expression | None:
        self.next_token()
        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None or not self.expect_lookahead(TokenType.RPAREN):
            return None
        return expression


def parse_program(
    source: str, grammar: str = DEFAULT_GRAMMAR
) -> tuple[Program, list[str]]:
    """Scan and parse `source`, returning the program and its diagnostics."""
    parser = Parser(Lexer(CharacterStream(source)), grammar=grammar)
    program = parser.parse_program()
    return program, parser.errors


__all__ = [
    "DEFAULT_GRAMMAR",
    "GRAMMARS",
    "Grammar",
    "Parser",
    "parse_int64",
    "parse_program",
]
