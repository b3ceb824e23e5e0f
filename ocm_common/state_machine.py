"""A small generic state machine driven by input values."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")
U = TypeVar("U")

START_STATE = "__$$_START_$$__"
END_STATE = "__$$_END_$$__"

Acceptor = Callable[[Any], bool]
TransitionInterceptor = Callable[["State", "State", Any], None]
TransitionObserver = Callable[["State", "State", Any], None]


class UnexpectedTokenError(ValueError):
    """Raised when no following state accepts a value."""

    def __init__(self, value: Any) -> None:
        super().__init__(f"unexpected token `{value}`")
        self.value = value


class State(Generic[T, U]):
    """One state of the machine, with the states reachable from it."""

    def __init__(
        self,
        name: str,
        data: Optional[T] = None,
        acceptor: Optional[Callable[[U], bool]] = None,
        *,
        is_eof: bool = False,
    ) -> None:
        self.name = name
        self.data = data
        self.acceptor = acceptor
        self.is_eof = is_eof
        self.last = False
        self.transitions: List[State[T, U]] = []
        self.interceptor: Optional[TransitionInterceptor] = None
        self.observers: List[TransitionObserver] = []

    def __repr__(self) -> str:
        return f"State({self.name!r})"

    def accepts(self, value: U) -> bool:
        return self.acceptor is not None and self.acceptor(value)

    def move(self, value: U) -> "State[T, U]":
        """Return the first following state that accepts ``value``.

        The target's interceptor runs first and may raise to refuse the move;
        then this state's observers are told.
        """
        for target in self.transitions:
            if target.accepts(value):
                if target.interceptor is not None:
                    target.interceptor(self, target, value)
                for observer in self.observers:
                    observer(self, target, value)
                return target
        raise UnexpectedTokenError(value)

    def eof(self) -> bool:
        """Whether input may end in this state."""
        return self.last

    def _add_next_state(self, target: "State[T, U]") -> None:
        if target.is_eof:
            self.last = True
        else:
            self.transitions.append(target)


def _new_start_state() -> State:
    return State("START", acceptor=lambda _value: False)


def _new_end_state() -> State:
    return State("END", is_eof=True)


@dataclass
class StateDefinition(Generic[T, U]):
    name: str
    acceptor: Optional[Callable[[U], bool]] = None
    state_data: Optional[T] = None
    on_intercept: Optional[Callable[[T, U], None]] = None


@dataclass
class TransitionDefinition:
    state_name: str
    valid_transitions: List[str] = field(default_factory=list)


@dataclass
class StateMachineDefinition(Generic[T, U]):
    states: List[StateDefinition] = field(default_factory=list)
    transitions: List[TransitionDefinition] = field(default_factory=list)


class StateBuilder(Generic[T, U]):
    """Fluent builder of a single :class:`State`."""

    def __init__(self, state_name: str) -> None:
        self._state: State[T, U] = State(state_name)

    def data(self, state_data: T) -> "StateBuilder[T, U]":
        self._state.data = state_data
        return self

    def accept(self, acceptor: Callable[[U], bool]) -> "StateBuilder[T, U]":
        self._state.acceptor = acceptor
        return self

    def with_transition_interceptor(
        self, handler: Optional[TransitionInterceptor]
    ) -> "StateBuilder[T, U]":
        self._state.interceptor = handler
        return self

    def with_transition_observer(self, *args: TransitionObserver) -> "StateBuilder[T, U]":
        self._state.observers.extend(args)
        return self

    def build(self) -> State[T, U]:
        return self._state


class StateMachineBuilder(Generic[T, U]):
    """Builds a connected state machine from a definition."""

    def __init__(self) -> None:
        self._definition: Optional[StateMachineDefinition] = None
        self._interceptor: Optional[TransitionInterceptor] = None
        self._observers: List[TransitionObserver] = []

    def with_state_machine_definition(
        self, definition: StateMachineDefinition
    ) -> "StateMachineBuilder[T, U]":
        self._definition = definition
        return self

    def with_transition_interceptor(
        self, handler: Optional[TransitionInterceptor]
    ) -> "StateMachineBuilder[T, U]":
        self._interceptor = handler
        return self

    def with_transition_observer(
        self, observer: TransitionObserver
    ) -> "StateMachineBuilder[T, U]":
        self._observers.append(observer)
        return self

    def build(self) -> State[T, U]:
        """Return the start state of the built machine."""
        if self._definition is None:
            raise ValueError("no state machine definition given")

        states: dict = {START_STATE: _new_start_state(), END_STATE: _new_end_state()}
        for definition in self._definition.states:
            states[definition.name] = (
                StateBuilder(definition.name)
                .data(definition.state_data)
                .accept(definition.acceptor)
                .with_transition_interceptor(self._interceptor)
                .with_transition_observer(*self._observers)
                .build()
            )

        for transition in self._definition.transitions:
            try:
                current = states[transition.state_name]
            except KeyError:
                raise ValueError(f"unknown state `{transition.state_name}`") from None
            for target_name in transition.valid_transitions:
                try:
                    target = states[target_name]
                except KeyError:
                    raise ValueError(f"unknown state `{target_name}`") from None
                current._add_next_state(target)

        return states[START_STATE]