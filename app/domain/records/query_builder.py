"""
Dynamic SQL builder for the records API.

Composes one statement per request from the schema, table, optional
record identifier, list filters, acting role and acting user. The output
is always a statement plus named bind parameters: identifiers are quoted,
values are bound, nothing untrusted is concatenated into the SQL text.

Results are shaped by PostgreSQL itself into a single JSON text column
(``json_agg`` for lists, ``row_to_json`` for single rows) so the serving
layer never marshals rows one by one.
"""

import json
import re
from typing import Any, Iterable, Mapping, Optional

from app.domain.records.entities import BuiltQuery, ResultShape
from app.domain.records.errors import InvalidFilterError, InvalidIdentifierError

RECORD_KEY_COLUMN = "id"
DEFAULT_USER_ID_SETTING = "request.user_id"

IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_$\-]{0,62}")
TABLE_SEPARATORS = re.compile(r"[-_]")
DIGITS = re.compile(r"[0-9]+")

RESERVED_FILTER_KEYS = frozenset({"select", "order", "limit", "offset"})
FILTER_OPERATORS = {
    "eq": "=",
    "neq": "<>",
    "gt": ">",
    "gte": ">=",
    "lt": "<",
    "lte": "<=",
    "like": "LIKE",
    "ilike": "ILIKE",
}
IS_OPERANDS = {"null": "NULL", "true": "TRUE", "false": "FALSE"}
ORDER_DIRECTIONS = {"asc": "ASC", "desc": "DESC"}


def quote_ident(name: str) -> str:
    """Return ``name`` as a double-quoted SQL identifier.

    Raises:
        InvalidIdentifierError: If the name is not a plain identifier.
    """
    if not isinstance(name, str) or not IDENTIFIER_PATTERN.fullmatch(name):
        raise InvalidIdentifierError(f"Invalid identifier: {name!r}")
    return '"' + name.replace('"', '""') + '"'


def base_table_name(table: str) -> str:
    """Return the base table behind a view name.

    Only the part before the first hyphen or underscore is the real
    table, so ``orders_view`` and ``orders-summary`` both write to
    ``orders``. A name starting with a separator is returned unchanged.
    """
    prefix = TABLE_SEPARATORS.split(table, maxsplit=1)[0]
    return prefix or table


def _bindable(value: Any) -> Any:
    # JSON objects and arrays travel as JSON text and are cast by the column type.
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return value


class QueryBuilder:
    """Fluent, single-use builder for role-scoped record statements.

    Usage:
        query = (
            QueryBuilder("shop", "orders")
            .with_filters([("status", "eq.open")])
            .json_array()
            .as_role("web")
            .as_user("42")
            .select()
        )
    """

    def __init__(
        self,
        schema: str,
        table: str,
        user_id_setting: str = DEFAULT_USER_ID_SETTING,
    ) -> None:
        self._schema = schema
        self._table = table
        self._user_id_setting = user_id_setting
        self._record: Optional[str] = None
        self._filters: tuple[tuple[str, str], ...] = ()
        self._role: Optional[str] = None
        self._user_id: Optional[str] = None
        self._shape = ResultShape.JSON_ARRAY
        self._params: dict[str, Any] = {}

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def with_record(self, record: Optional[str]) -> "QueryBuilder":
        self._record = record
        return self

    def with_filters(self, filters: Iterable[tuple[str, str]]) -> "QueryBuilder":
        self._filters = tuple(filters)
        return self

    def as_role(self, role: str) -> "QueryBuilder":
        self._role = role
        return self

    def as_user(self, user_id: str) -> "QueryBuilder":
        self._user_id = user_id
        return self

    def json_array(self) -> "QueryBuilder":
        self._shape = ResultShape.JSON_ARRAY
        return self

    def json_object(self) -> "QueryBuilder":
        self._shape = ResultShape.JSON_OBJECT
        return self

    @property
    def write_table(self) -> str:
        """Table targeted by insert, update and delete."""
        return base_table_name(self._table)

    # ------------------------------------------------------------------
    # Terminal operations
    # ------------------------------------------------------------------

    def select(self) -> BuiltQuery:
        """Build a read of ``table``, shaped as a JSON array or object."""
        columns = self._select_list()
        clauses = self._filter_clauses()
        if self._record is not None:
            clauses.insert(0, self._record_predicate())

        inner = f"SELECT {columns} FROM {self._target(self._table)}"
        if clauses:
            inner += " WHERE " + " AND ".join(clauses)
        inner += self._order_clause() + self._paging_clause()

        aggregate = "json_agg(t)" if self._shape is ResultShape.JSON_ARRAY else "row_to_json(t)"
        sql = f"SELECT {aggregate}::text FROM ({inner}) t"
        return self._finish(sql, self._shape)

    def insert(self, body: Optional[Mapping[str, Any]] = None) -> BuiltQuery:
        """Build an insert returning the new row as a JSON object.

        An empty or absent body inserts a row made entirely of column defaults.
        """
        target = self._target(self.write_table)
        if not body:
            statement = f"INSERT INTO {target} DEFAULT VALUES RETURNING *"
        else:
            columns = ", ".join(quote_ident(col) for col in body)
            values = ", ".join(self._bind(_bindable(val)) for val in body.values())
            statement = f"INSERT INTO {target} ({columns}) VALUES ({values}) RETURNING *"
        return self._finish(self._returning_json(statement), ResultShape.JSON_OBJECT)

    def update(self, body: Mapping[str, Any]) -> BuiltQuery:
        """Build an update of one record returning the row as a JSON object."""
        if not body:
            raise ValueError("update requires at least one column")
        assignments = ", ".join(
            f"{quote_ident(col)} = {self._bind(_bindable(val))}" for col, val in body.items()
        )
        statement = (
            f"UPDATE {self._target(self.write_table)} SET {assignments} "
            f"WHERE {self._record_predicate()} RETURNING *"
        )
        return self._finish(self._returning_json(statement), ResultShape.JSON_OBJECT)

    def delete(self) -> BuiltQuery:
        """Build a delete of one record. Callers read the affected row count."""
        sql = f"DELETE FROM {self._target(self.write_table)} WHERE {self._record_predicate()}"
        return self._finish(sql, ResultShape.ROW_COUNT)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _bind(self, value: Any) -> str:
        name = f"p{len(self._params)}"
        self._params[name] = value
        return f":{name}"

    def _target(self, table: str) -> str:
        return f"{quote_ident(self._schema)}.{quote_ident(table)}"

    def _record_predicate(self) -> str:
        if self._record is None:
            raise ValueError("record identifier is required")
        return f"{quote_ident(RECORD_KEY_COLUMN)} = {self._bind(self._record)}"

    @staticmethod
    def _returning_json(statement: str) -> str:
        return f"WITH t AS ({statement}) SELECT row_to_json(t)::text FROM t"

    def _reserved(self, key: str) -> Optional[str]:
        # Last occurrence wins for reserved keys.
        value = None
        for k, v in self._filters:
            if k == key:
                value = v
        return value

    def _select_list(self) -> str:
        raw = self._reserved("select")
        if not raw or raw.strip() == "*":
            return "*"
        columns = [c.strip() for c in raw.split(",") if c.strip()]
        if not columns:
            raise InvalidFilterError(f"Invalid select list: {raw!r}")
        return ", ".join(quote_ident(c) for c in columns)

    def _filter_clauses(self) -> list[str]:
        equals: dict[str, list[str]] = {}
        clauses: list[str] = []
        for key, raw in self._filters:
            if key in RESERVED_FILTER_KEYS:
                continue
            op, sep, operand = raw.partition(".")
            if not sep or (op not in FILTER_OPERATORS and op != "is"):
                op, operand = "eq", raw

            if op == "eq":
                equals.setdefault(key, []).append(operand)
            elif op == "is":
                keyword = IS_OPERANDS.get(operand.lower())
                if keyword is None:
                    raise InvalidFilterError(f"Invalid 'is' filter on {key}: {operand!r}")
                clauses.append(f"{quote_ident(key)} IS {keyword}")
            else:
                clauses.append(f"{quote_ident(key)} {FILTER_OPERATORS[op]} {self._bind(operand)}")

        eq_clauses = []
        for key, values in equals.items():
            if len(values) == 1:
                eq_clauses.append(f"{quote_ident(key)} = {self._bind(values[0])}")
            else:
                binds = ", ".join(self._bind(v) for v in values)
                eq_clauses.append(f"{quote_ident(key)} IN ({binds})")
        return eq_clauses + clauses

    def _order_clause(self) -> str:
        raw = self._reserved("order")
        if not raw:
            return ""
        terms = []
        for item in raw.split(","):
            column, _, direction = item.strip().partition(".")
            keyword = ORDER_DIRECTIONS.get((direction or "asc").lower())
            if not column or keyword is None:
                raise InvalidFilterError(f"Invalid order term: {item!r}")
            terms.append(f"{quote_ident(column)} {keyword}")
        return " ORDER BY " + ", ".join(terms)

    def _paging_clause(self) -> str:
        clause = ""
        for key in ("limit", "offset"):
            raw = self._reserved(key)
            if raw is None:
                continue
            if not DIGITS.fullmatch(raw):
                raise InvalidFilterError(f"Invalid {key}: {raw!r}")
            clause += f" {key.upper()} {self._bind(int(raw))}"
        return clause

    def _finish(self, sql: str, shape: ResultShape) -> BuiltQuery:
        if not self._role or not self._user_id:
            raise ValueError("role and user id must be set before building")
        return BuiltQuery(
            sql=sql,
            params=dict(self._params),
            shape=shape,
            role=self._role,
            user_id=self._user_id,
            session_sql=(
                "SELECT set_config('role', :role, true), "
                "set_config(:user_id_setting, :user_id, true)"
            ),
            session_params={
                "role": self._role,
                "user_id_setting": self._user_id_setting,
                "user_id": self._user_id,
            },
        )
