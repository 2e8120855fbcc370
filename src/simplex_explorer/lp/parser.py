from __future__ import annotations

import re
from typing import List, NamedTuple, Optional, Tuple

from ..errors import ParseError
from .expression import LinearExpression

_TOKEN = re.compile(
    r"""
      (?P<space>\s+)
    | (?P<number>\d+(?:\.\d*)?|\.\d+)
    | (?P<name>[A-Za-z_][A-Za-z0-9_]*)
    | (?P<reserved>@[A-Za-z0-9_]+)
    | (?P<operator><=|>=|==|<|>|=)
    | (?P<sign>[+-])
    | (?P<times>\*)
    """,
    re.VERBOSE,
)
_TERM_START = {"sign", "number", "name", "reserved"}


class Token(NamedTuple):
    kind: str
    text: str
    position: int


def tokenize(text: str) -> List[Token]:
    tokens: List[Token] = []
    position = 0
    while position < len(text):
        match = _TOKEN.match(text, position)
        if match is None:
            raise ParseError(f"Unexpected character '{text[position]}'", text, position)
        kind = match.lastgroup or ""
        if kind != "space":
            tokens.append(Token(kind, match.group(0), position))
        position = match.end()
    return tokens


class _ExpressionParser:
    """
    Recursive descent over a token slice.

        expression := term*
        term       := [sign] [number] ['*' name | name]

    A term needs a number or a name; a bare number feeds the constant and a bare
    name gets coefficient 1 (or -1 after a minus sign).
    """

    def __init__(self, tokens: List[Token], text: str, allow_reserved: bool) -> None:
        self.tokens = tokens
        self.text = text
        self.allow_reserved = allow_reserved
        self.index = 0

    def peek(self) -> Optional[Token]:
        return self.tokens[self.index] if self.index < len(self.tokens) else None

    def take(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def _position(self) -> int:
        token = self.peek()
        return token.position if token is not None else len(self.text)

    def _at(self, *kinds: str) -> bool:
        token = self.peek()
        return token is not None and token.kind in kinds

    def expression(self) -> LinearExpression:
        result = LinearExpression()
        while self._at(*_TERM_START):
            self.term(result)
        token = self.peek()
        if token is not None:
            raise ParseError(f"Unexpected '{token.text}'", self.text, token.position)
        return result

    def term(self, result: LinearExpression) -> None:
        start = self.take() if self._at("sign") else None
        sign = -1.0 if start is not None and start.text == "-" else 1.0

        coefficient: Optional[float] = None
        if self._at("number"):
            coefficient = float(self.take().text)
        if self._at("times"):
            if coefficient is None:
                raise ParseError("'*' must follow a number", self.text, self._position())
            self.take()
            if not self._at("name", "reserved"):
                raise ParseError("Expected a variable after '*'", self.text, self._position())

        variable: Optional[str] = None
        if self._at("name", "reserved"):
            token = self.take()
            if token.kind == "reserved" and not self.allow_reserved:
                raise ParseError(
                    f"Variable names starting with '{token.text[0]}' are reserved", self.text, token.position
                )
            variable = token.text

        if coefficient is None and variable is None:
            sign_text = start.text if start is not None else ""
            raise ParseError(f"Expected a number or variable after '{sign_text}'", self.text, self._position())

        value = sign * (1.0 if coefficient is None else coefficient)
        if variable is None:
            result.constant += value
        else:
            result.set_coefficient(variable, result.coefficient(variable) + value)


def parse_expression(text: str, allow_reserved: bool = False) -> LinearExpression:
    return _ExpressionParser(tokenize(text), text, allow_reserved).expression()


def parse_relation(text: str, allow_reserved: bool = False) -> Tuple[LinearExpression, str, LinearExpression]:
    """Split ``expr OP expr`` and parse both sides; returns the operator symbol as written."""

    tokens = tokenize(text)
    operators = [idx for idx, token in enumerate(tokens) if token.kind == "operator"]
    if not operators:
        raise ParseError("Missing comparison operator (one of <=, >=, <, >, =)", text, len(text))
    if len(operators) > 1:
        raise ParseError("More than one comparison operator", text, tokens[operators[1]].position)

    split = operators[0]
    left_tokens, right_tokens = tokens[:split], tokens[split + 1 :]
    if not left_tokens:
        raise ParseError("Missing left-hand side", text, tokens[split].position)
    if not right_tokens:
        raise ParseError("Missing right-hand side", text, len(text))

    left = _ExpressionParser(left_tokens, text, allow_reserved).expression()
    right = _ExpressionParser(right_tokens, text, allow_reserved).expression()
    return left, tokens[split].text, right
