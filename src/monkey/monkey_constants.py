"""
Shared lexical and grammar tables for the Monkey front end.

Everything in this module is a read-only, process-wide constant:

    TokenType:
        Closed enumeration of every token kind the scanner can produce.
    keywords:
        Exact spelling -> keyword kind. Any other identifier is `IDENT`.
    single_char_tokens:
        One-character operators and delimiters that map one-to-one to a kind.
    Precedence:
        Operator binding strength, lowest to highest.
    precedences:
        Infix token kind -> precedence. Kinds not listed bind at LOWEST.

Exports:
    - TokenType
    - Precedence
    - keywords
    - single_char_tokens
    - precedences
    - lookup_ident
"""

from enum import Enum, IntEnum
from types import MappingProxyType


class TokenType(str, Enum):
    """Token kinds. The value is the spelling used in diagnostics."""

    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    # Identifiers + literals
    IDENT = "IDENT"
    INT = "INT"

    # Operators
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    BANG = "!"
    ASTERISK = "*"
    SLASH = "/"
    LT = "<"
    GT = ">"
    EQ = "=="
    NOT_EQ = "!="

    # Delimiters
    COMMA = ","
    SEMICOLON = ";"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"

    # Keywords
    FUNCTION = "FUNCTION"
    LET = "LET"
    TRUE = "TRUE"
    FALSE = "FALSE"
    IF = "IF"
    ELSE = "ELSE"
    RETURN = "RETURN"

    def __str__(self) -> str:
        return self.value


class Precedence(IntEnum):
    """Binding strength of an operator; a higher value binds tighter."""

    LOWEST = 1
    EQUALS = 2  # == !=
    LESSGREATER = 3  # < >
    SUM = 4  # + -
    PRODUCT = 5  # * /
    PREFIX = 6  # -x !x
    CALL = 7  # reserved for f(x)


keywords = MappingProxyType(
    {
        "fn": TokenType.FUNCTION,
        "let": TokenType.LET,
        "true": TokenType.TRUE,
        "false": TokenType.FALSE,
        "if": TokenType.IF,
        "else": TokenType.ELSE,
        "return": TokenType.RETURN,
    }
)

# `=` and `!` are absent: they may start `==` / `!=` and need a peek.
single_char_tokens = MappingProxyType(
    {
        "+": TokenType.PLUS,
        "-": TokenType.MINUS,
        "*": TokenType.ASTERISK,
        "/": TokenType.SLASH,
        "<": TokenType.LT,
        ">": TokenType.GT,
        ",": TokenType.COMMA,
        ";": TokenType.SEMICOLON,
        "(": TokenType.LPAREN,
        ")": TokenType.RPAREN,
        "{": TokenType.LBRACE,
        "}": TokenType.RBRACE,
    }
)

precedences = MappingProxyType(
    {
        TokenType.EQ: Precedence.EQUALS,
        TokenType.NOT_EQ: Precedence.EQUALS,
        TokenType.LT: Precedence.LESSGREATER,
        TokenType.GT: Precedence.LESSGREATER,
        TokenType.PLUS: Precedence.SUM,
        TokenType.MINUS: Precedence.SUM,
        TokenType.ASTERISK: Precedence.PRODUCT,
        TokenType.SLASH: Precedence.PRODUCT,
    }
)


def lookup_ident(ident: str) -> TokenType:
    """Classify an identifier's text as a keyword kind or plain `IDENT`."""
    return keywords.get(ident, TokenType.IDENT)


__all__ = [
    "Precedence",
    "TokenType",
    "keywords",
    "lookup_ident",
    "precedences",
    "single_char_tokens",
]
