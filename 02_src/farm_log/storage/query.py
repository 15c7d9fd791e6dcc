"""Filterable, sortable entity query primitive."""

from dataclasses import dataclass, field
from typing import Any, Protocol

from ..errors import QueryError


@dataclass(frozen=True)
class ReferenceField:
    """Multi-value entity reference stored in a link table."""

    table: str
    source_column: str
    target_column: str


@dataclass(frozen=True)
class EntityTypeDefinition:
    """Queryable shape of an entity type."""

    name: str
    table: str
    fields: frozenset[str]
    references: dict[str, ReferenceField] = field(default_factory=dict)

    def has_field(self, name: str) -> bool:
        return name in self.fields or name in self.references


ENTITY_TYPES: dict[str, EntityTypeDefinition] = {
    "asset": EntityTypeDefinition(
        name="asset",
        table="asset",
        fields=frozenset({"id", "type", "name", "status", "created"}),
    ),
    "log": EntityTypeDefinition(
        name="log",
        table="log",
        fields=frozenset({"id", "type", "name", "timestamp", "status"}),
        references={
            "asset": ReferenceField(
                table="log_asset", source_column="log_id", target_column="asset_id"
            ),
        },
    ),
}


@dataclass(frozen=True)
class Condition:
    """A single field predicate."""

    field: str
    value: Any
    operator: str = "="


class IQueryExecutor(Protocol):
    """Backend that runs entity queries."""

    async def execute_query(self, query: "EntityQuery") -> list[int]:
        """Return matching entity ids."""
        ...

    async def count_query(self, query: "EntityQuery") -> int:
        """Return the number of matching entities."""
        ...


class EntityQuery:
    """
    Query over one entity type.

    Builder methods return the query so calls can be chained:

        ids = await (
            storage.get_query("log")
            .condition("type", "observation")
            .sort("timestamp", "DESC")
            .range(0, 10)
            .access_check(False)
            .execute()
        )

    Conditions on reference fields (e.g. log "asset") match entities whose
    reference set contains the value.
    """

    OPERATORS = frozenset({"=", "<>", "<", "<=", ">", ">=", "IN"})
    REFERENCE_OPERATORS = frozenset({"=", "IN"})

    def __init__(self, executor: IQueryExecutor, definition: EntityTypeDefinition):
        self._executor = executor
        self.definition = definition
        self.conditions: list[Condition] = []
        self.sorts: list[tuple[str, str]] = []
        self.start = 0
        self.length: int | None = None
        self.checked: bool | None = None

    @property
    def entity_type(self) -> str:
        return self.definition.name

    def condition(self, field: str, value: Any, operator: str = "=") -> "EntityQuery":
        """Add a predicate. All predicates must match."""
        operator = operator.upper()
        if not self.definition.has_field(field):
            raise QueryError(f"Unknown field '{field}' on entity type '{self.entity_type}'")
        if operator not in self.OPERATORS:
            raise QueryError(f"Unsupported operator '{operator}'")
        if field in self.definition.references and operator not in self.REFERENCE_OPERATORS:
            raise QueryError(f"Operator '{operator}' not supported on reference field '{field}'")
        if operator == "IN" and isinstance(value, (str, bytes)):
            raise QueryError("IN conditions take a sequence of values")

        self.conditions.append(Condition(field, value, operator))
        return self

    def sort(self, field: str, direction: str = "ASC") -> "EntityQuery":
        """Add a sort key. Earlier keys take precedence."""
        direction = direction.upper()
        if field not in self.definition.fields:
            raise QueryError(f"Cannot sort '{self.entity_type}' by '{field}'")
        if direction not in ("ASC", "DESC"):
            raise QueryError(f"Invalid sort direction '{direction}'")

        self.sorts.append((field, direction))
        return self

    def range(self, start: int = 0, length: int | None = None) -> "EntityQuery":
        """Restrict results to a window of the sorted result."""
        if start < 0 or (length is not None and length < 0):
            raise QueryError("Query range must not be negative")
        self.start = start
        self.length = length
        return self

    def access_check(self, enabled: bool = True) -> "EntityQuery":
        """Set whether the storage access policy filters results."""
        self.checked = enabled
        return self

    async def execute(self) -> list[int]:
        """Run the query and return matching ids in sort order."""
        self._require_access_mode()
        return await self._executor.execute_query(self)

    async def count(self) -> int:
        """Count matching entities, ignoring the range."""
        self._require_access_mode()
        return await self._executor.count_query(self)

    def _require_access_mode(self) -> None:
        if self.checked is None:
            raise QueryError(
                "Entity queries must explicitly set whether they are access checked"
            )

    def to_sql(self, *, paged: bool = True) -> tuple[str, list[Any]]:
        """Compile to a SELECT of entity ids with bound parameters."""
        table = self.definition.table
        where: list[str] = []
        params: list[Any] = []

        for cond in self.conditions:
            reference = self.definition.references.get(cond.field)
            if reference is not None:
                target = self._compile_operand(
                    f"r.{reference.target_column}", cond, params
                )
                where.append(
                    f"EXISTS (SELECT 1 FROM {reference.table} r "
                    f"WHERE r.{reference.source_column} = {table}.id AND {target})"
                )
            else:
                where.append(self._compile_operand(f"{table}.{cond.field}", cond, params))

        sql = f"SELECT {table}.id FROM {table}"
        if where:
            sql += " WHERE " + " AND ".join(where)
        if self.sorts:
            sql += " ORDER BY " + ", ".join(
                f"{table}.{name} {direction}" for name, direction in self.sorts
            )

        if paged and (self.length is not None or self.start):
            sql += " LIMIT ? OFFSET ?"
            params.extend([-1 if self.length is None else self.length, self.start])

        return sql, params

    @staticmethod
    def _compile_operand(column: str, cond: Condition, params: list[Any]) -> str:
        if cond.operator == "IN":
            values = list(cond.value)
            if not values:
                return "0"
            params.extend(values)
            return f"{column} IN ({','.join('?' * len(values))})"

        params.append(cond.value)
        return f"{column} {cond.operator} ?"
