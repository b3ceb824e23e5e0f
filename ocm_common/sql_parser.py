"""Parse and validate the part of an SQL statement after ``WHERE``."""

from __future__ import annotations

from typing import Any, Iterable, List, Tuple

from ocm_common import sql_grammar
from ocm_common.sql_scanner import SQLScanner
from ocm_common.state_machine import State
from ocm_common.string_parser import ParseError, StringParserBuilder

DEFAULT_MAXIMUM_COMPLEXITY = 10


class SQLParser:
    """Parses WHERE clauses, replacing every value by a ``?`` placeholder.

    ``valid_columns`` limits the accepted column names (any when empty),
    ``column_prefix`` is put before columns that lack it, and
    ``maximum_complexity`` caps the number of logical operators.
    """

    def __init__(
        self,
        valid_columns: Iterable[str] = (),
        column_prefix: str = "",
        maximum_complexity: int = DEFAULT_MAXIMUM_COMPLEXITY,
    ) -> None:
        self.valid_columns: List[str] = list(valid_columns)
        self.column_prefix = column_prefix.strip(" ")
        self.maximum_complexity = maximum_complexity

        self._parser = (
            StringParserBuilder()
            .with_grammar(sql_grammar.basic_sql_grammar())
            .with_transition_interceptor(self._intercept)
            .with_scanner(SQLScanner())
            .build()
        )
        self._reset()

    def parse(self, sql: str) -> Tuple[str, List[Any]]:
        """Return the query with placeholders and the values that fill them.

        Raises :class:`ParseError` when the clause is invalid.
        """
        self._reset()
        self._parser.parse(sql)
        if self._open_braces > 0:
            raise ParseError("EOF while searching for closing brace ')'")
        return self._query.strip(" "), list(self._values)

    def _reset(self) -> None:
        self._complexity = 0
        self._open_braces = 0
        self._query = ""
        self._values: List[Any] = []

    def _count_braces(self, token: str) -> None:
        if token == "(":
            self._open_braces += 1
        elif token == ")":
            self._open_braces -= 1
        if self._open_braces < 0:
            raise ValueError("unexpected ')'")

    def _intercept(self, _from_state: State, to_state: State, token: str) -> None:
        family = to_state.data
        if family == sql_grammar.BRACE_TOKEN_FAMILY:
            self._count_braces(token)
            self._query += token
        elif family == sql_grammar.VALUE_TOKEN_FAMILY:
            self._query += " ?"
            self._values.append(token)
        elif family == sql_grammar.QUOTED_VALUE_TOKEN_FAMILY:
            self._query += " ?"
            unescaped = token.replace("\\'", "'")
            if len(unescaped) > 1:
                unescaped = unescaped[1:-1]
            self._values.append(unescaped)
        elif family == sql_grammar.LOGICAL_OP_TOKEN_FAMILY:
            self._complexity += 1
            if self._complexity > self.maximum_complexity:
                raise ValueError(
                    "maximum number of permitted joins "
                    f"({self.maximum_complexity}) exceeded"
                )
            self._query += f" {token} "
        elif family == sql_grammar.COLUMN_TOKEN_FAMILY:
            column = token.lower()
            if self.valid_columns and column not in self.valid_columns:
                raise ValueError(
                    f"invalid column name: '{token}', valid values are: "
                    f"[{' '.join(self.valid_columns)}]"
                )
            if self.column_prefix and not column.startswith(self.column_prefix + "."):
                column = f"{self.column_prefix}.{column}"
            self._query += column
        else:
            self._query += f" {token}"