import pytest

from ocm_common.sql_grammar import basic_sql_grammar
from ocm_common.sql_scanner import SQLScanner
from ocm_common.state_machine import END_STATE, START_STATE
from ocm_common.string_parser import ParseError, StringParserBuilder


def _tracing_parser():
    visited = []

    def interceptor(_from_state, to_state, _value):
        visited.append(to_state.name)

    parser = (
        StringParserBuilder()
        .with_grammar(basic_sql_grammar())
        .with_scanner(SQLScanner())
        .with_transition_interceptor(interceptor)
        .build()
    )
    return parser, visited


def test_token_names_are_unique():
    names = [token.name for token in basic_sql_grammar().tokens]
    assert len(names) == len(set(names))


def test_transitions_reference_known_tokens():
    grammar = basic_sql_grammar()
    known = {token.name for token in grammar.tokens} | {START_STATE, END_STATE}
    for transition in grammar.transitions:
        assert transition.token_name in known
        assert set(transition.valid_transitions) <= known


def test_state_machine_definition_mirrors_grammar():
    grammar = basic_sql_grammar()
    definition = grammar.to_state_machine_definition()
    assert [s.name for s in definition.states] == [t.name for t in grammar.tokens]
    assert [t.state_name for t in definition.transitions] == [
        t.token_name for t in grammar.transitions
    ]


def test_simple_comparison_path():
    parser, visited = _tracing_parser()
    parser.parse("name = value")
    assert visited == ["COLUMN", "EQ", "VALUE"]


def test_jsonb_path():
    parser, visited = _tracing_parser()
    parser.parse("manifest->'data'->>'foo' = 'bar'")
    assert visited == [
        "COLUMN",
        "JSONB_ARROW",
        "JSON_FIELD",
        "JSONB_TOSTRING",
        "JSONB_FIELD_TO_STRINGIFY",
        "EQ",
        "QUOTED_VALUE",
    ]


def test_negated_in_list_path():
    parser, visited = _tracing_parser()
    parser.parse("owner not in (a, 'b')")
    assert visited == [
        "COLUMN",
        "NOT",
        "IN",
        "LIST_OPEN_BRACE",
        "VALUE_IN_LIST",
        "COMMA",
        "QUOTED_VALUE_IN_LIST",
        "CLOSED_BRACE",
    ]


def test_leading_operator_is_rejected():
    parser, _ = _tracing_parser()
    with pytest.raises(ParseError) as info:
        parser.parse("=")
    assert str(info.value) == "[1] error parsing the filter: unexpected token `=`"


@pytest.mark.parametrize(
    "candidate, expected",
    [("cloud_provider", True), ("resources.payload", True), ("Name", True), ("1abc", False)],
)
def test_column_acceptor(candidate, expected):
    column = next(t for t in basic_sql_grammar().tokens if t.name == "COLUMN")
    assert column.acceptor(candidate) is expected