"""Grammar of the SQL ``WHERE`` clauses accepted by the SQL parser."""

from __future__ import annotations

from typing import Callable, Optional

from ocm_common.state_machine import END_STATE, START_STATE, StateDefinition
from ocm_common.string_parser import (
    Grammar,
    TokenTransitions,
    regexp_acceptor,
    string_acceptor,
)

# Token families, stored as the data of each state.
BRACE_TOKEN_FAMILY = "BRACE"
OP_TOKEN_FAMILY = "OP"
LOGICAL_OP_TOKEN_FAMILY = "LOGICAL"
COLUMN_TOKEN_FAMILY = "COLUMN"
OTHERS_TOKEN_FAMILY = "OTHERS"
VALUE_TOKEN_FAMILY = "VALUE"
QUOTED_VALUE_TOKEN_FAMILY = "QUOTED"
JSONB_FAMILY = "JSONB"

# Token names.
OPEN_BRACE = "OPEN_BRACE"
CLOSED_BRACE = "CLOSED_BRACE"
COMMA = "COMMA"
COLUMN = "COLUMN"
VALUE = "VALUE"
QUOTED_VALUE = "QUOTED_VALUE"
EQ = "EQ"
NOT_EQ = "NOT_EQ"
GT = "GREATER_THAN"
LT = "LESS_THAN"
GTE = "GREATER_THAN_OR_EQUAL"
LTE = "LESS_THAN_OR_EQUAL"
LIKE = "LIKE"
ILIKE = "ILIKE"
IN = "IN"
LIST_OPEN_BRACE = "LIST_OPEN_BRACE"
QUOTED_VALUE_IN_LIST = "QUOTED_VALUE_IN_LIST"
VALUE_IN_LIST = "VALUE_IN_LIST"
AND = "AND"
OR = "OR"
NOT = "NOT"
JSONB_FIELD = "JSON_FIELD"
JSONB_ARROW = "JSONB_ARROW"
JSONB_TO_STRING = "JSONB_TOSTRING"
JSONB_CONTAINS = "@>"
JSONB_FIELD_TO_STRINGIFY = "JSONB_FIELD_TO_STRINGIFY"

_QUOTED = r"'([^']|\\')*'"
_UNQUOTED = r"[^'() ]*"


def _token(
    name: str, family: Optional[str], acceptor: Callable[[str], bool]
) -> StateDefinition:
    return StateDefinition(name=name, acceptor=acceptor, state_data=family)


def basic_sql_grammar() -> Grammar:
    """Return the grammar of a basic SQL filter, with IN lists and JSONB paths."""
    tokens = [
        _token(OPEN_BRACE, BRACE_TOKEN_FAMILY, string_acceptor("(")),
        _token(CLOSED_BRACE, BRACE_TOKEN_FAMILY, string_acceptor(")")),
        _token(COLUMN, COLUMN_TOKEN_FAMILY, regexp_acceptor(r"(?i)[A-Z][A-Z0-9_.]*")),
        _token(VALUE, VALUE_TOKEN_FAMILY, regexp_acceptor(_UNQUOTED)),
        _token(QUOTED_VALUE, QUOTED_VALUE_TOKEN_FAMILY, regexp_acceptor(_QUOTED)),
        _token(EQ, OP_TOKEN_FAMILY, string_acceptor("=")),
        _token(GT, OP_TOKEN_FAMILY, string_acceptor(">")),
        _token(LT, OP_TOKEN_FAMILY, string_acceptor("<")),
        _token(GTE, OP_TOKEN_FAMILY, string_acceptor(">=")),
        _token(LTE, OP_TOKEN_FAMILY, string_acceptor("<=")),
        _token(COMMA, None, string_acceptor(",")),
        _token(NOT_EQ, OP_TOKEN_FAMILY, string_acceptor("<>")),
        _token(LIKE, OP_TOKEN_FAMILY, regexp_acceptor("(?i)LIKE")),
        _token(ILIKE, OP_TOKEN_FAMILY, regexp_acceptor("(?i)ILIKE")),
        _token(IN, OP_TOKEN_FAMILY, regexp_acceptor("(?i)IN")),
        _token(LIST_OPEN_BRACE, BRACE_TOKEN_FAMILY, string_acceptor("(")),
        _token(QUOTED_VALUE_IN_LIST, QUOTED_VALUE_TOKEN_FAMILY, regexp_acceptor(_QUOTED)),
        _token(VALUE_IN_LIST, VALUE_TOKEN_FAMILY, regexp_acceptor(_UNQUOTED)),
        _token(AND, LOGICAL_OP_TOKEN_FAMILY, regexp_acceptor("(?i)AND")),
        _token(OR, LOGICAL_OP_TOKEN_FAMILY, regexp_acceptor("(?i)OR")),
        _token(NOT, LOGICAL_OP_TOKEN_FAMILY, regexp_acceptor("(?i)NOT")),
        _token(JSONB_ARROW, JSONB_FAMILY, string_acceptor("->")),
        _token(JSONB_FIELD, JSONB_FAMILY, regexp_acceptor(_QUOTED)),
        _token(JSONB_TO_STRING, JSONB_FAMILY, string_acceptor("->>")),
        _token(JSONB_CONTAINS, JSONB_FAMILY, string_acceptor("@>")),
        _token(JSONB_FIELD_TO_STRINGIFY, JSONB_FAMILY, regexp_acceptor(_QUOTED)),
    ]

    after_value = [OR, AND, CLOSED_BRACE, END_STATE]
    values = [QUOTED_VALUE, VALUE]
    list_values = [QUOTED_VALUE_IN_LIST, VALUE_IN_LIST]
    transitions = [
        TokenTransitions(START_STATE, [COLUMN, OPEN_BRACE]),
        TokenTransitions(OPEN_BRACE, [COLUMN, OPEN_BRACE]),
        TokenTransitions(
            COLUMN, [GT, LT, GTE, LTE, EQ, NOT_EQ, LIKE, ILIKE, IN, NOT, JSONB_ARROW]
        ),
        *(
            TokenTransitions(op, list(values))
            for op in (EQ, NOT_EQ, GT, LT, LTE, GTE, LIKE, ILIKE)
        ),
        TokenTransitions(QUOTED_VALUE, list(after_value)),
        TokenTransitions(VALUE, list(after_value)),
        TokenTransitions(CLOSED_BRACE, list(after_value)),
        TokenTransitions(AND, [COLUMN, OPEN_BRACE]),
        TokenTransitions(OR, [COLUMN, OPEN_BRACE]),
        TokenTransitions(NOT, [IN]),
        TokenTransitions(IN, [LIST_OPEN_BRACE]),
        TokenTransitions(LIST_OPEN_BRACE, list(list_values)),
        TokenTransitions(QUOTED_VALUE_IN_LIST, [COMMA, CLOSED_BRACE]),
        TokenTransitions(VALUE_IN_LIST, [COMMA, CLOSED_BRACE]),
        TokenTransitions(COMMA, list(list_values)),
        TokenTransitions(JSONB_ARROW, [JSONB_FIELD]),
        TokenTransitions(JSONB_FIELD, [JSONB_ARROW, JSONB_TO_STRING, JSONB_CONTAINS]),
        TokenTransitions(JSONB_TO_STRING, [JSONB_FIELD_TO_STRINGIFY]),
        TokenTransitions(JSONB_FIELD_TO_STRINGIFY, [EQ, NOT_EQ, LIKE, ILIKE, IN, NOT]),
        TokenTransitions(JSONB_CONTAINS, [QUOTED_VALUE]),
    ]
    return Grammar(tokens=tokens, transitions=transitions)