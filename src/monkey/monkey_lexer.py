"""
Lexical analyzer for the Monkey language.

This module converts raw source text into a stream of tokens:

Classes:
    CharacterStream: Read-only source buffer with a one-character cursor.
    Token: Immutable (type, literal) pair.
    Lexer: Produces one Token per call from a CharacterStream.

Features:
    - Skips whitespace (space, tab, newline, carriage return)
    - Two-character operators `==` and `!=` via one-character peek
    - Recognizes:
        * Identifiers and keywords (`let`, `return`, `fn`, `if`, `else`, `true`, `false`)
        * Integer literals (ASCII digit runs)
        * Single-character operators and delimiters

The lexer never raises: unknown characters become `ILLEGAL` tokens and the end
of input is reported as an `EOF` token on every call after it is reached.

Example:
    >>> lexer = Lexer(CharacterStream("let five = 5;"))
    >>> lexer.next_token()
    Token(LET, let)

Exports:
    - CharacterStream
    - Token
    - Lexer
    - tokenize
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass

from monkey.monkey_constants import TokenType, lookup_ident, single_char_tokens

EOF_CHAR = "\0"


class CharacterStream:
    """
    Cursor over a fixed source string.

    Attributes:
        source (str): The full input text, never modified.
        position (int): Index of the current character.
        read_position (int): Index of the next character to read.
        ch (str): Current character, or `EOF_CHAR` at/after the end of input.
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self.position = 0
        self.read_position = 0
        self.ch = EOF_CHAR
        self.read_char()

    def read_char(self) -> None:
        """Moves the cursor one character forward."""
        if self.read_position >= len(self.source):
            self.ch = EOF_CHAR
        else:
            self.ch = self.source[self.read_position]
        self.position = self.read_position
        # Stays put once past the end so repeated reads are harmless.
        if self.read_position <= len(self.source):
            self.read_position += 1

    def peek_char(self) -> str:
        """Returns the next character without advancing, or `EOF_CHAR`."""
        if self.read_position >= len(self.source):
            return EOF_CHAR
        return self.source[self.read_position]

    def end_of_file(self) -> bool:
        return self.ch == EOF_CHAR and self.position >= len(self.source)


@dataclass(frozen=True)
class Token:
    """A single lexical token.

    Attributes:
        type (TokenType): The token kind.
        literal (str): The exact source text of the token (empty for EOF).
    """

    type: TokenType
    literal: str

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.literal})"


def is_letter(ch: str) -> bool:
    return "a" <= ch <= "z" or "A" <= ch <= "Z" or ch == "_"


def is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


class Lexer:
    """Lexical analyzer for the Monkey language.

    Takes a CharacterStream and hands out Token objects one call at a time.
    Iterating over a Lexer yields tokens up to and including the first EOF.

    Attributes:
        stream (CharacterStream): The source being scanned.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def __iter__(self) -> Iterator[Token]:
        while True:
            tok = self.next_token()
            yield tok
            if tok.type is TokenType.EOF:
                return

    def skip_whitespace(self) -> None:
        while self.stream.ch in " \t\n\r":
            self.stream.read_char()

    def read_while(self, predicate: Callable[[str], bool]) -> str:
        """Consumes the maximal run of characters accepted by `predicate`."""
        start = self.stream.position
        while predicate(self.stream.ch):
            self.stream.read_char()
        return self.stream.source[start : self.stream.position]

    def match_two_char(self, second: str, double: TokenType, single: TokenType) -> Token:
        """Builds `==`/`!=` when the next character is `second`, else the single token."""
        first = self.stream.ch
        if self.stream.peek_char() == second:
            self.stream.read_char()
            return Token(double, first + self.stream.ch)
        return Token(single, first)

    def next_token(self) -> Token:
        """Consumes and returns the next Token.

        Returns:
            Token: The next token; `EOF` (empty literal) once input is exhausted.
        """
        self.skip_whitespace()
        ch = self.stream.ch

        if ch == EOF_CHAR and self.stream.end_of_file():
            return Token(TokenType.EOF, "")

        # Identifier/keyword and number paths advance the cursor themselves.
        if is_letter(ch):
            ident = self.read_while(is_letter)
            return Token(lookup_ident(ident), ident)

        if is_digit(ch):
            return Token(TokenType.INT, self.read_while(is_digit))

        if ch == "=":
            tok = self.match_two_char("=", TokenType.EQ, TokenType.ASSIGN)
        elif ch == "!":
            tok = self.match_two_char("=", TokenType.NOT_EQ, TokenType.BANG)
        elif ch in single_char_tokens:
            tok = Token(single_char_tokens[ch], ch)
        else:
            tok = Token(TokenType.ILLEGAL, ch)

        self.stream.read_char()
        return tok


def tokenize(source: str) -> list[Token]:
    """Scans `source` completely, returning every token through the first EOF."""
    return list(Lexer(CharacterStream(source)))


__all__ = ["CharacterStream", "Lexer", "Token", "tokenize"]
