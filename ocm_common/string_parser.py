"""Parse strings against a grammar of tokens and allowed transitions."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ocm_common.state_machine import (
    State,
    StateDefinition,
    StateMachineBuilder,
    StateMachineDefinition,
    TransitionDefinition,
    TransitionInterceptor,
    TransitionObserver,
)
from ocm_common.string_scanner import Scanner, SimpleScanner

TokenDefinition = StateDefinition

_GLOBAL_FLAGS = re.compile(r"\(\?[aiLmsux]+\)")


class ParseError(ValueError):
    """Raised when a string does not follow the grammar.

    ``position`` is the one-based position of the offending token, or None
    when the input ended too early.
    """

    def __init__(self, message: str, position: Optional[int] = None) -> None:
        super().__init__(message)
        self.position = position


def string_acceptor(value_to_accept: str) -> Callable[[str], bool]:
    """Return an acceptor matching exactly ``value_to_accept``."""
    return lambda current_value: current_value == value_to_accept


def _anchor(pattern: str) -> str:
    body = pattern[1:] if pattern.startswith("^") else pattern
    flags = ""
    while (match := _GLOBAL_FLAGS.match(body)) is not None:
        flags += match.group()
        body = body[match.end():]
    if body.endswith("$"):
        if not body.endswith("\\$"):
            body = body[:-1] + r"\Z"
    else:
        body += r"\Z"
    return f"{flags}^{body}"


def regexp_acceptor(regexp_to_accept: str) -> Callable[[str], bool]:
    """Return an acceptor matching the whole value against a regular expression.

    The expression is anchored at both ends. An invalid expression accepts
    nothing.
    """
    try:
        compiled = re.compile(_anchor(regexp_to_accept))
    except re.error:
        return lambda _current_value: False
    return lambda current_value: compiled.search(current_value) is not None


@dataclass
class TokenTransitions:
    """The tokens that may follow the token named ``token_name``."""

    token_name: str
    valid_transitions: List[str] = field(default_factory=list)

    def _to_transition_definition(self) -> TransitionDefinition:
        return TransitionDefinition(
            state_name=self.token_name,
            valid_transitions=list(self.valid_transitions),
        )


@dataclass
class Grammar:
    """Tokens and transitions, in the vocabulary of string parsing."""

    tokens: List[StateDefinition] = field(default_factory=list)
    transitions: List[TokenTransitions] = field(default_factory=list)

    def to_state_machine_definition(self) -> StateMachineDefinition:
        return StateMachineDefinition(
            states=list(self.tokens),
            transitions=[t._to_transition_definition() for t in self.transitions],
        )


class StringParser:
    """Feeds the tokens of a scanner through a state machine."""

    def __init__(self, start: State, scanner: Scanner) -> None:
        self._start = start
        self._scanner = scanner

    def parse(self, text: str) -> None:
        """Parse ``text``; raise :class:`ParseError` if it breaks the grammar."""
        state = self._start
        scanner = self._scanner
        scanner.init(text)

        for token in scanner:
            try:
                state = state.move(token.value)
            except ValueError as err:
                position = token.position + 1
                raise ParseError(
                    f"[{position}] error parsing the filter: {err}", position
                ) from err

        if not state.eof():
            raise ParseError("EOF encountered while parsing string")


class StringParserBuilder:
    """Fluent builder of a :class:`StringParser`.

    The scanner defaults to one that yields single characters.
    """

    def __init__(self) -> None:
        self._grammar = Grammar()
        self._scanner: Scanner = SimpleScanner()
        self._interceptor: Optional[TransitionInterceptor] = None
        self._observers: List[TransitionObserver] = []

    def with_scanner(self, scanner: Scanner) -> "StringParserBuilder":
        self._scanner = scanner
        return self

    def with_grammar(self, grammar: Grammar) -> "StringParserBuilder":
        self._grammar = grammar
        return self

    def with_transition_interceptor(
        self, interceptor: Optional[TransitionInterceptor]
    ) -> "StringParserBuilder":
        self._interceptor = interceptor
        return self

    def with_transition_observer(
        self, observer: TransitionObserver
    ) -> "StringParserBuilder":
        self._observers.append(observer)
        return self

    def build(self) -> StringParser:
        builder = (
            StateMachineBuilder()
            .with_state_machine_definition(self._grammar.to_state_machine_definition())
            .with_transition_interceptor(self._interceptor)
        )
        for observer in self._observers:
            builder = builder.with_transition_observer(observer)
        return StringParser(builder.build(), self._scanner)