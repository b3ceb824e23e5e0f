"""Scanners that split a string into tokens."""

from __future__ import annotations

import abc
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, Optional


@dataclass
class Token:
    """A token found by a scanner; ``position`` is zero based."""

    token_type: int
    value: str
    position: int


class Scanner(abc.ABC):
    """Splits a string into tokens and walks through them."""

    @abc.abstractmethod
    def init(self, text: str) -> None:
        """Feed the scanner with the text to scan."""

    @abc.abstractmethod
    def next(self) -> bool:
        """Move to the next token; return False when there is none."""

    @abc.abstractmethod
    def peek(self) -> Optional[Token]:
        """Return the next token without moving, or None."""

    @abc.abstractmethod
    def token(self) -> Token:
        """Return the current token; raise IndexError if there is none."""

    def __iter__(self) -> Iterator[Token]:
        while self.next():
            yield self.token()


class CharType(IntEnum):
    ALPHA = 0
    DIGIT = 1
    DECIMALPOINT = 2
    SYMBOL = 3


def _char_type(char: str) -> CharType:
    if "a" <= char <= "z" or "A" <= char <= "Z":
        return CharType.ALPHA
    if "0" <= char <= "9":
        return CharType.DIGIT
    if char == ".":
        return CharType.DECIMALPOINT
    return CharType.SYMBOL


class SimpleScanner(Scanner):
    """Scanner whose tokens are the single characters of the text."""

    def __init__(self) -> None:
        self._value = ""
        self._pos = -1

    def init(self, text: str) -> None:
        self._pos = -1
        self._value = text

    def next(self) -> bool:
        if self._pos < len(self._value) - 1:
            self._pos += 1
            return True
        return False

    def _make_token(self, position: int) -> Token:
        char = self._value[position]
        return Token(token_type=_char_type(char), value=char, position=position)

    def peek(self) -> Optional[Token]:
        if self._pos < len(self._value) - 1:
            return self._make_token(self._pos + 1)
        return None

    def token(self) -> Token:
        if 0 <= self._pos < len(self._value):
            return self._make_token(self._pos)
        raise IndexError("No tokens available")