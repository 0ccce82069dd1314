"""
Defines the abstract syntax tree (AST) for the Monkey language.

The node set is closed. Statements and expressions are unions over frozen
dataclasses rather than an open class hierarchy, so every consumer can match
on the concrete variant:

    Statement  = LetStatement | ReturnStatement | ExpressionStatement
    Expression = Identifier | IntegerLiteral | PrefixExpression | InfixExpression

Every node offers:
    token_literal(): the literal text of the token that introduced the node.
    render(): the canonical textual form, fully parenthesized for expressions.
    to_dict(): a JSON-friendly nested dictionary (see `ASTDict`).

Nodes are built bottom-up by the parser and never mutated afterwards. Each
node exclusively owns its children.

Example:
    >>> program.render()
    'let x = (5 + (2 * 3));'
"""

from dataclasses import dataclass
from typing import Any, TypedDict, Union

from monkey.monkey_lexer import Token


class ASTDict(TypedDict, total=False):
    """
    Serialized shape of a node.

    Fields:
        kind (str): Snake-case variant name (e.g. "let_statement", "infix_expression").
        token (str): Literal of the defining token.
        value (Any): Identifier name, integer value, or nested ASTDict.
        name (ASTDict): Binding name of a `let`.
        operator (str): Prefix/infix operator spelling.
        left (ASTDict): Left operand of an infix expression.
        right (ASTDict): Right operand of a prefix/infix expression.
        expression (ASTDict): Wrapped expression of an expression statement.
        statements (list[ASTDict]): Top-level statements of a program.
    """

    kind: str
    token: str
    value: Any
    name: "ASTDict"
    operator: str
    left: "ASTDict | None"
    right: "ASTDict | None"
    expression: "ASTDict | None"
    statements: list["ASTDict"]


def _dump(node: Any) -> Any:
    return node.to_dict() if node is not None else None


@dataclass(frozen=True)
class Identifier:
    token: Token
    value: str

    def token_literal(self) -> str:
        return self.token.literal

    def render(self) -> str:
        return self.value

    def to_dict(self) -> ASTDict:
        return {"kind": "identifier", "token": self.token.literal, "value": self.value}


@dataclass(frozen=True)
class IntegerLiteral:
    """A signed 64-bit integer. `value` is None only if conversion failed."""

    token: Token
    value: int | None

    def token_literal(self) -> str:
        return self.token.literal

    def render(self) -> str:
        return self.token.literal

    def to_dict(self) -> ASTDict:
        return {
            "kind": "integer_literal",
            "token": self.token.literal,
            "value": self.value,
        }


@dataclass(frozen=True)
class PrefixExpression:
    token: Token  # the operator token, `!` or `-`
    operator: str
    right: "Expression"

    def token_literal(self) -> str:
        return self.token.literal

    def render(self) -> str:
        return f"({self.operator}{self.right.render()})"

    def to_dict(self) -> ASTDict:
        return {
            "kind": "prefix_expression",
            "token": self.token.literal,
            "operator": self.operator,
            "right": self.right.to_dict(),
        }


@dataclass(frozen=True)
class InfixExpression:
    token: Token  # the operator token, e.g. `+`
    left: "Expression"
    operator: str
    right: "Expression"

    def token_literal(self) -> str:
        return self.token.literal

    def render(self) -> str:
        return f"({self.left.render()} {self.operator} {self.right.render()})"

    def to_dict(self) -> ASTDict:
        return {
            "kind": "infix_expression",
            "token": self.token.literal,
            "left": self.left.to_dict(),
            "operator": self.operator,
            "right": self.right.to_dict(),
        }


Expression = Union[Identifier, IntegerLiteral, PrefixExpression, InfixExpression]


@dataclass(frozen=True)
class LetStatement:
    """`let <name> = <value>;`. `value` is None when it was skipped or failed to parse."""

    token: Token
    name: Identifier
    value: Expression | None = None

    def token_literal(self) -> str:
        return self.token.literal

    def render(self) -> str:
        value = self.value.render() if self.value is not None else ""
        return f"{self.token_literal()} {self.name.render()} = {value};"

    def to_dict(self) -> ASTDict:
        return {
            "kind": "let_statement",
            "token": self.token.literal,
            "name": self.name.to_dict(),
            "value": _dump(self.value),
        }


@dataclass(frozen=True)
class ReturnStatement:
    token: Token
    return_value: Expression | None = None

    def token_literal(self) -> str:
        return self.token.literal

    def render(self) -> str:
        value = self.return_value.render() if self.return_value is not None else ""
        return f"{self.token_literal()} {value};"

    def to_dict(self) -> ASTDict:
        return {
            "kind": "return_statement",
            "token": self.token.literal,
            "value": _dump(self.return_value),
        }


@dataclass(frozen=True)
class ExpressionStatement:
    token: Token  # first token of the expression
    expression: Expression | None

    def token_literal(self) -> str:
        return self.token.literal

    def render(self) -> str:
        return self.expression.render() if self.expression is not None else ""

    def to_dict(self) -> ASTDict:
        return {
            "kind": "expression_statement",
            "token": self.token.literal,
            "expression": _dump(self.expression),
        }


Statement = Union[LetStatement, ReturnStatement, ExpressionStatement]


@dataclass(frozen=True)
class Program:
    """Root node: statements in source order."""

    statements: tuple[Statement, ...] = ()

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def render(self) -> str:
        return "".join(stmt.render() for stmt in self.statements)

    def to_dict(self) -> ASTDict:
        return {
            "kind": "program",
            "token": self.token_literal(),
            "statements": [stmt.to_dict() for stmt in self.statements],
        }


Node = Union[Program, Statement, Expression]

__all__ = [
    "ASTDict",
    "Expression",
    "ExpressionStatement",
    "Identifier",
    "InfixExpression",
    "IntegerLiteral",
    "LetStatement",
    "Node",
    "PrefixExpression",
    "Program",
    "ReturnStatement",
    "Statement",
]
