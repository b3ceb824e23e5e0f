# ocm-common

Small shared helpers in pure Python, with no third-party dependencies.

| Module | What it holds |
| --- | --- |
| `ocm_common.utils` | `random_label`, `truncate`, `generate_password` |
| `ocm_common.state_machine` | `State`, `StateBuilder`, `StateMachineBuilder`, `StateDefinition`, `TransitionDefinition`, `StateMachineDefinition`, `UnexpectedTokenError` |
| `ocm_common.string_scanner` | `Token`, the abstract `Scanner`, `SimpleScanner` (one token per character), `CharType` |
| `ocm_common.string_parser` | `Grammar`, `TokenTransitions`, `StringParser`, `StringParserBuilder`, `string_acceptor`, `regexp_acceptor`, `ParseError` |
| `ocm_common.sql_scanner` | `SQLScanner`, `SQLTokenType` |
| `ocm_common.sql_grammar` | `basic_sql_grammar()` |
| `ocm_common.sql_parser` | `SQLParser` |

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Parsing WHERE clauses

`SQLParser.parse` takes the part of a query that follows `WHERE`. It checks the clause against the grammar and returns a tuple: the query with every value replaced by a `?` placeholder, and the list of those values.

```python
from ocm_common.sql_parser import SQLParser

parser = SQLParser()
query, values = parser.parse("name = 'test' and (owner <> bob or region IN ('a', 'b'))")
# query  -> "name = ? and (owner <> ? or region IN( ? , ?))"
# values -> ["test", "bob", "a", "b"]
```

Quoted values may contain spaces, commas and braces. Inside quotes, `\'` escapes a quote and is unescaped in the returned value.

JSONB navigation (`->`, `->>`) and containment (`@>`) are supported:

```python
parser.parse("manifest->'data'->>'foo' = 'bar'")
# ("manifest -> 'data' ->> 'foo' = ?", ["bar"])
```

`SQLParser` takes three keyword options:

- `valid_columns`: the accepted column names. Column names are lower-cased before the check. When empty, any column is accepted.
- `column_prefix`: prepended as `prefix.` to column names that do not already start with it. Surrounding spaces are stripped, so a prefix of only spaces means no prefix.
- `maximum_complexity`: the maximum number of `AND`, `OR` and `NOT` operators. The default is 10.

```python
restricted = SQLParser(valid_columns=["name", "owner"], column_prefix="main", maximum_complexity=3)
restricted.parse("name = a or owner = b")
# ("main.name = ? or main.owner = ?", ["a", "b"])
```

An invalid clause raises `ocm_common.string_parser.ParseError`, a subclass of `ValueError`. When a token is at fault, the message starts with the token's one-based position and the `position` attribute holds it:

```
[1] error parsing the filter: unexpected token `=`
```

Input that stops too early gives `EOF encountered while parsing string`, and an unclosed brace gives `EOF while searching for closing brace ')'`.

## The state machine

You describe the states and the allowed transitions. `StateMachineBuilder.build()` returns the start state. `State.move(value)` returns the next state or raises `UnexpectedTokenError`. `State.eof()` tells whether the input may end there.

```python
from ocm_common.state_machine import (
    END_STATE, START_STATE, StateDefinition, StateMachineBuilder,
    StateMachineDefinition, TransitionDefinition,
)

definition = StateMachineDefinition(
    states=[
        StateDefinition(name="OPEN", acceptor=lambda v: v == "OPEN"),
        StateDefinition(name="CLOSED", acceptor=lambda v: v == "CLOSED"),
    ],
    transitions=[
        TransitionDefinition(START_STATE, ["OPEN"]),
        TransitionDefinition("OPEN", ["CLOSED"]),
        TransitionDefinition("CLOSED", [END_STATE]),
    ],
)
state = StateMachineBuilder().with_state_machine_definition(definition).build()
state = state.move("OPEN").move("CLOSED")
state.eof()  # True
```

A transition interceptor set on the builder runs before each move and can refuse the move by raising. Observers are told of each move.

To parse your own languages, combine a `Grammar` with a `Scanner` through `StringParserBuilder`. If no scanner is given, `SimpleScanner` is used.

## Utilities

```python
from ocm_common.utils import random_label, truncate, generate_password

random_label(6)          # e.g. "a1b2c3": letters at even positions, digits at odd ones
truncate("abcdef", 3)    # "abc"
generate_password(10)    # at least one lower-case, upper-case, digit and special character
```

`generate_password` always returns at least four characters, even for a smaller `length`.

## What this package does not do

It is a library only. It has no command-line tool. It does not connect to or query any database: `SQLParser` only validates a filter and returns the placeholder query and its values, for you to pass to your own database driver.