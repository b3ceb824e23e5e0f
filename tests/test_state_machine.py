import pytest

from ocm_common.state_machine import (
    END_STATE,
    START_STATE,
    StateBuilder,
    StateDefinition,
    StateMachineBuilder,
    StateMachineDefinition,
    TransitionDefinition,
    UnexpectedTokenError,
)

NAMES = [
    "NEW",
    "ASSIGNED",
    "IN PROGRESS",
    "WAITING FOR REVIEW",
    "REVIEWING",
    "WAITING FOR RELEASE",
    "WON'T DO",
    "DONE",
]


def _acceptor_for(expected):
    return lambda value: value == expected


def _definition():
    return StateMachineDefinition(
        states=[StateDefinition(name=n, acceptor=_acceptor_for(n), state_data=n.lower()) for n in NAMES],
        transitions=[
            TransitionDefinition(START_STATE, ["NEW"]),
            TransitionDefinition("NEW", ["ASSIGNED", "WON'T DO"]),
            TransitionDefinition("ASSIGNED", ["IN PROGRESS", "WON'T DO"]),
            TransitionDefinition("IN PROGRESS", ["WAITING FOR REVIEW", "ASSIGNED", "WON'T DO"]),
            TransitionDefinition("WAITING FOR REVIEW", ["IN PROGRESS", "REVIEWING", "WON'T DO"]),
            TransitionDefinition("REVIEWING", ["IN PROGRESS", "WON'T DO", "WAITING FOR RELEASE"]),
            TransitionDefinition("WAITING FOR RELEASE", ["DONE", "WON'T DO", "IN PROGRESS"]),
            TransitionDefinition("DONE", [END_STATE]),
            TransitionDefinition("WON'T DO", [END_STATE]),
        ],
    )


def _machine(builder=None):
    builder = builder or StateMachineBuilder()
    return builder.with_state_machine_definition(_definition()).build()


@pytest.mark.parametrize(
    "path",
    [
        ["NEW", "ASSIGNED", "WON'T DO"],
        ["NEW", "ASSIGNED", "IN PROGRESS", "WAITING FOR REVIEW", "REVIEWING", "WON'T DO"],
        ["NEW", "ASSIGNED", "IN PROGRESS", "WAITING FOR REVIEW", "REVIEWING", "WAITING FOR RELEASE", "DONE"],
        [
            "NEW", "ASSIGNED", "IN PROGRESS", "WAITING FOR REVIEW", "IN PROGRESS",
            "WAITING FOR REVIEW", "REVIEWING", "WAITING FOR RELEASE", "DONE",
        ],
    ],
)
def test_valid_paths(path):
    state = _machine()
    for value in path:
        state = state.move(value)
    assert state.eof() is True
    assert state.name == path[-1]


@pytest.mark.parametrize(
    "path, message",
    [
        (["NEW", "ASSIGNED", "IN PROGRESS", "DONE"], "unexpected token `DONE`"),
        (["NEW", "ASSIGNED", "IN PROGRESS", "WAITING FOR REVIEW", "ASSIGNED"], "unexpected token `ASSIGNED`"),
    ],
)
def test_invalid_paths(path, message):
    state = _machine()
    for value in path[:-1]:
        state = state.move(value)
    assert state.eof() is False
    with pytest.raises(UnexpectedTokenError) as info:
        state.move(path[-1])
    assert str(info.value) == message


def test_end_state_not_reached():
    state = _machine()
    for value in ["NEW", "ASSIGNED", "IN PROGRESS", "WAITING FOR REVIEW"]:
        state = state.move(value)
    assert state.eof() is False


def test_start_state_is_not_final():
    assert _machine().eof() is False


def test_state_data_is_kept():
    state = _machine().move("NEW")
    assert state.data == "new"


def test_interceptor_sees_every_transition():
    seen = []
    builder = StateMachineBuilder().with_transition_interceptor(
        lambda src, dst, value: seen.append((src.name, dst.name, value))
    )
    state = _machine(builder)
    state.move("NEW").move("ASSIGNED")
    assert seen == [("START", "NEW", "NEW"), ("NEW", "ASSIGNED", "ASSIGNED")]


def test_interceptor_can_refuse_a_move():
    def refuse(_src, dst, _value):
        if dst.name == "ASSIGNED":
            raise RuntimeError("refused")

    state = _machine(StateMachineBuilder().with_transition_interceptor(refuse)).move("NEW")
    with pytest.raises(RuntimeError, match="refused"):
        state.move("ASSIGNED")


def test_observers_are_called_from_built_states_only():
    seen = []
    builder = StateMachineBuilder().with_transition_observer(
        lambda src, dst, value: seen.append((src.name, dst.name))
    )
    state = _machine(builder)
    state.move("NEW").move("ASSIGNED")
    assert seen == [("NEW", "ASSIGNED")]


def test_unknown_transition_name_raises():
    definition = StateMachineDefinition(
        states=[StateDefinition(name="A", acceptor=_acceptor_for("A"))],
        transitions=[TransitionDefinition(START_STATE, ["MISSING"])],
    )
    with pytest.raises(ValueError, match="MISSING"):
        StateMachineBuilder().with_state_machine_definition(definition).build()


def test_state_builder_sets_fields():
    observer_calls = []
    state = (
        StateBuilder("X")
        .data(42)
        .accept(_acceptor_for("x"))
        .with_transition_observer(lambda *a: observer_calls.append(a))
        .build()
    )
    assert state.name == "X"
    assert state.data == 42
    assert state.accepts("x") is True
    assert state.accepts("y") is False
    assert len(state.observers) == 1