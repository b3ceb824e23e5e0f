"""Scanner that splits SQL filter strings into words, operators and quoted text."""

from __future__ import annotations

from enum import IntEnum
from typing import List, Optional, Tuple

from ocm_common.string_scanner import Scanner, Token


class SQLTokenType(IntEnum):
    OP = 0
    BRACE = 1
    LITERAL = 2
    QUOTED_LITERAL = 3
    NO_TOKEN = 4


_OPERATOR_CHARS = frozenset("@-=<>")


class SQLScanner(Scanner):
    """Splits SQL text by whole words, operators, braces and quoted strings.

    Inside quotes a backslash escapes the next quote.
    """

    def __init__(self) -> None:
        self._tokens: List[Token] = []
        self._pos = -1

    def init(self, text: str) -> None:
        self._pos = -1
        self._tokens = []

        pending: List[Tuple[str, int]] = []
        current = SQLTokenType.NO_TOKEN
        quoted = False
        escaped = False

        def flush() -> None:
            nonlocal pending, current
            value = "".join(part for part, _ in pending)
            if value:
                self._tokens.append(Token(current, value, pending[0][1]))
            pending = []
            current = SQLTokenType.NO_TOKEN

        def start_word(kind: SQLTokenType, accepted: Tuple[SQLTokenType, ...]) -> None:
            if current is not SQLTokenType.NO_TOKEN and current not in accepted:
                flush()

        literal_kinds = (SQLTokenType.LITERAL, SQLTokenType.QUOTED_LITERAL)

        for position, char in enumerate(text):
            if char == "'" and quoted:
                pending.append((char, position))
                if not escaped:
                    flush()
                    quoted = False
                escaped = False
            elif char == "\\" and quoted:
                escaped = True
                pending.append((char, position))
            elif quoted:
                pending.append((char, position))
            elif char == " ":
                flush()
            elif char == ",":
                flush()
                self._tokens.append(Token(SQLTokenType.LITERAL, char, position))
            elif char == "'":
                flush()
                quoted = True
                current = SQLTokenType.QUOTED_LITERAL
                pending.append((char, position))
            elif char in _OPERATOR_CHARS:
                start_word(SQLTokenType.OP, (SQLTokenType.OP,))
                pending.append((char, position))
                current = SQLTokenType.OP
            elif char in "()":
                flush()
                self._tokens.append(Token(SQLTokenType.BRACE, char, position))
            else:
                start_word(SQLTokenType.LITERAL, literal_kinds)
                current = SQLTokenType.LITERAL
                pending.append((char, position))

        flush()

    def next(self) -> bool:
        if self._pos < len(self._tokens) - 1:
            self._pos += 1
            return True
        return False

    def peek(self) -> Optional[Token]:
        if self._pos < len(self._tokens) - 1:
            upcoming = self._tokens[self._pos + 1]
            return Token(upcoming.token_type, upcoming.value, upcoming.position)
        return None

    def token(self) -> Token:
        if not 0 <= self._pos < len(self._tokens):
            raise IndexError(f"invalid scanner position {self._pos}")
        current = self._tokens[self._pos]
        return Token(current.token_type, current.value, current.position)