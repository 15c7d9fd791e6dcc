"""SQLite entity storage implementation."""

from collections.abc import AsyncIterator, Callable, Iterable, Mapping
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Protocol, Union

import aiosqlite

from ..config import resolve_db_path
from ..errors import StorageError
from ..logging_config import get_logger
from ..models import Asset, Log, TextLong
from ..models.logs import epoch_seconds
from ..workflow import IStatusDefaulter
from .query import ENTITY_TYPES, EntityQuery, EntityTypeDefinition

logger = get_logger(__name__)

Entity = Union[Asset, Log]

# (entity_type, entity_id) -> visible
AccessPolicy = Callable[[str, int], bool]

ASSET_FIELDS = frozenset({"type", "name", "status", "created"})
LOG_FIELDS = frozenset({"type", "timestamp", "status", "name", "asset", "notes"})


class IStorage(Protocol):
    """Persistent storage for assets and logs (SQLite)."""

    async def init(self) -> None:
        """Initialize database and create tables."""
        ...

    async def close(self) -> None:
        """Close database connection."""
        ...

    def create(self, entity_type: str, fields: Mapping[str, Any]) -> Entity:
        """Build a new, unsaved entity. Logs get their default status here."""
        ...

    async def save(self, entity: Entity) -> None:
        """Insert or update an entity."""
        ...

    async def load(self, entity_type: str, entity_id: int) -> Entity | None:
        """Load an entity by ID."""
        ...

    async def load_multiple(self, entity_type: str, entity_ids: Iterable[int]) -> list:
        """Load entities in the given ID order, skipping missing IDs."""
        ...

    async def delete(self, entity: Entity) -> None:
        """Delete an entity and the references to it."""
        ...

    def get_query(self, entity_type: str) -> EntityQuery:
        """Start a query over an entity type."""
        ...

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        ...


class Storage:
    """SQLite storage implementation."""

    def __init__(
        self,
        db_path: str | Path | None = None,
        status_defaulter: IStatusDefaulter | None = None,
        access_policy: AccessPolicy | None = None,
    ):
        if db_path is None:
            self._db_path = resolve_db_path()
        else:
            self._db_path = resolve_db_path(db_path)
        self._status_defaulter = status_defaulter
        self._access_policy = access_policy
        self._conn: aiosqlite.Connection | None = None

    async def init(self) -> None:
        """Initialize database and create tables."""
        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema_sql = f.read()

        async with self._errors("initialize storage"):
            self._conn = await aiosqlite.connect(self._db_path)
            await self._conn.execute("PRAGMA foreign_keys = ON")
            await self._conn.executescript(schema_sql)
            await self._conn.commit()
        logger.debug("Storage initialized at %s", self._db_path)

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    @property
    def conn(self) -> aiosqlite.Connection:
        if not self._conn:
            raise StorageError("Storage not initialized")
        return self._conn

    @asynccontextmanager
    async def _errors(self, action: str) -> AsyncIterator[None]:
        """Re-raise driver errors as StorageError."""
        try:
            yield
        except aiosqlite.Error as e:
            logger.error("Failed to %s: %s", action, e)
            if self._conn is not None and self._conn.in_transaction:
                await self._conn.rollback()
            raise StorageError(f"Failed to {action}: {e}") from e

    # Entities
    def create(self, entity_type: str, fields: Mapping[str, Any]) -> Entity:
        """Build a new, unsaved entity. Logs get their default status here."""
        _definition(entity_type)
        values = {key: value for key, value in fields.items() if value is not None}

        if not values.get("type"):
            raise ValueError(f"A {entity_type} must have a type")

        if entity_type == "asset":
            _reject_unknown(entity_type, values, ASSET_FIELDS)
            return Asset(**values)

        _reject_unknown(entity_type, values, LOG_FIELDS)
        references = _references(values.pop("asset", []))
        notes = values.pop("notes", None)
        if "timestamp" in values:
            values["timestamp"] = epoch_seconds(values["timestamp"])

        log = Log(**values)
        for asset in references:
            log.add_asset(asset)
        if notes is not None:
            log.notes = _text_long(notes)

        if self._status_defaulter is not None:
            self._status_defaulter.apply(log)
        return log

    async def save(self, entity: Entity) -> None:
        """Insert or update an entity."""
        if isinstance(entity, Log):
            entity.timestamp = epoch_seconds(entity.timestamp)
        conn = self.conn
        async with self._errors(f"save {entity.entity_type}"):
            if isinstance(entity, Asset):
                entity_id = await self._save_asset(conn, entity)
            else:
                entity_id = await self._save_log(conn, entity)
            await conn.commit()
        # Only set once committed, so a failed insert leaves the entity new.
        entity.id = entity_id

    async def _save_asset(self, conn: aiosqlite.Connection, asset: Asset) -> int:
        if asset.id is None:
            cursor = await conn.execute(
                """
                INSERT INTO asset (type, name, status, created)
                VALUES (?, ?, ?, ?)
                """,
                (asset.type, asset.name, asset.status, asset.created),
            )
            return cursor.lastrowid

        await conn.execute(
            """
            UPDATE asset SET type = ?, name = ?, status = ?, created = ?
            WHERE id = ?
            """,
            (asset.type, asset.name, asset.status, asset.created, asset.id),
        )
        return asset.id

    async def _save_log(self, conn: aiosqlite.Connection, log: Log) -> int:
        notes_value = log.notes.value if log.notes else None
        notes_format = log.notes.format if log.notes else None

        if log.id is None:
            cursor = await conn.execute(
                """
                INSERT INTO log (type, name, timestamp, status, notes_value, notes_format)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (log.type, log.name, log.timestamp, log.status, notes_value, notes_format),
            )
            log_id = cursor.lastrowid
        else:
            log_id = log.id
            await conn.execute(
                """
                UPDATE log
                SET type = ?, name = ?, timestamp = ?, status = ?,
                    notes_value = ?, notes_format = ?
                WHERE id = ?
                """,
                (
                    log.type,
                    log.name,
                    log.timestamp,
                    log.status,
                    notes_value,
                    notes_format,
                    log_id,
                ),
            )
            await conn.execute("DELETE FROM log_asset WHERE log_id = ?", (log_id,))

        await conn.executemany(
            "INSERT INTO log_asset (log_id, asset_id, delta) VALUES (?, ?, ?)",
            [(log_id, asset_id, delta) for delta, asset_id in enumerate(log.asset)],
        )
        return log_id

    async def load(self, entity_type: str, entity_id: int) -> Entity | None:
        """Load an entity by ID."""
        entities = await self.load_multiple(entity_type, [entity_id])
        return entities[0] if entities else None

    async def load_multiple(self, entity_type: str, entity_ids: Iterable[int]) -> list:
        """Load entities in the given ID order, skipping missing IDs."""
        definition = _definition(entity_type)
        ids = list(entity_ids)
        if not ids:
            return []

        conn = self.conn
        placeholders = ",".join("?" * len(ids))
        async with self._errors(f"load {entity_type}"):
            if definition.name == "asset":
                cursor = await conn.execute(
                    f"""
                    SELECT id, type, name, status, created
                    FROM asset
                    WHERE id IN ({placeholders})
                    """,
                    ids,
                )
                rows = await cursor.fetchall()
                loaded = {
                    row[0]: Asset(
                        id=row[0],
                        type=row[1],
                        name=row[2],
                        status=row[3],
                        created=row[4],
                    )
                    for row in rows
                }
            else:
                loaded = await self._load_logs(conn, ids, placeholders)

        return [loaded[entity_id] for entity_id in ids if entity_id in loaded]

    async def _load_logs(
        self, conn: aiosqlite.Connection, ids: list[int], placeholders: str
    ) -> dict[int, Log]:
        cursor = await conn.execute(
            f"""
            SELECT id, type, name, timestamp, status, notes_value, notes_format
            FROM log
            WHERE id IN ({placeholders})
            """,
            ids,
        )
        rows = await cursor.fetchall()

        ref_cursor = await conn.execute(
            f"""
            SELECT log_id, asset_id
            FROM log_asset
            WHERE log_id IN ({placeholders})
            ORDER BY log_id, delta
            """,
            ids,
        )
        references: dict[int, list[int]] = {}
        for log_id, asset_id in await ref_cursor.fetchall():
            references.setdefault(log_id, []).append(asset_id)

        return {
            row[0]: Log(
                id=row[0],
                type=row[1],
                name=row[2],
                timestamp=row[3],
                status=row[4],
                notes=TextLong(row[5], row[6]) if row[5] is not None else None,
                asset=references.get(row[0], []),
            )
            for row in rows
        }

    async def delete(self, entity: Entity) -> None:
        """Delete an entity and the references to it."""
        if entity.id is None:
            return

        definition = _definition(entity.entity_type)
        conn = self.conn
        async with self._errors(f"delete {entity.entity_type}"):
            await conn.execute(f"DELETE FROM {definition.table} WHERE id = ?", (entity.id,))
            await conn.commit()
        entity.id = None

    # Queries
    def get_query(self, entity_type: str) -> EntityQuery:
        """Start a query over an entity type."""
        return EntityQuery(self, _definition(entity_type))

    async def execute_query(self, query: EntityQuery) -> list[int]:
        """Run an entity query and return matching ids."""
        if self._policy_applies(query):
            ids = await self._fetch_ids(query, paged=False)
            ids = [i for i in ids if self._access_policy(query.entity_type, i)]
            end = None if query.length is None else query.start + query.length
            return ids[query.start:end]

        return await self._fetch_ids(query, paged=True)

    async def count_query(self, query: EntityQuery) -> int:
        """Count entities matching a query, ignoring its range."""
        if self._policy_applies(query):
            ids = await self._fetch_ids(query, paged=False)
            return sum(1 for i in ids if self._access_policy(query.entity_type, i))

        sql, params = query.to_sql(paged=False)
        async with self._errors(f"count {query.entity_type}"):
            cursor = await self.conn.execute(f"SELECT COUNT(*) FROM ({sql})", params)
            row = await cursor.fetchone()
        return row[0]

    def _policy_applies(self, query: EntityQuery) -> bool:
        return bool(query.checked) and self._access_policy is not None

    async def _fetch_ids(self, query: EntityQuery, paged: bool) -> list[int]:
        sql, params = query.to_sql(paged=paged)
        logger.debug(
            "Executing %s query",
            query.entity_type,
            extra={"context": {"sql": sql, "params": params}},
        )
        async with self._errors(f"query {query.entity_type}"):
            cursor = await self.conn.execute(sql, params)
            rows = await cursor.fetchall()
        return [row[0] for row in rows]

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        conn = self.conn
        async with self._errors("clear storage"):
            for table in ["log_asset", "log", "asset"]:
                await conn.execute(f"DELETE FROM {table}")
            await conn.execute("DELETE FROM sqlite_sequence")
            await conn.commit()


def _definition(entity_type: str) -> EntityTypeDefinition:
    try:
        return ENTITY_TYPES[entity_type]
    except KeyError:
        raise ValueError(f"Unknown entity type '{entity_type}'") from None


def _reject_unknown(entity_type: str, values: Mapping[str, Any], allowed: frozenset) -> None:
    unknown = set(values) - allowed
    if unknown:
        raise ValueError(f"Unknown {entity_type} fields: {', '.join(sorted(unknown))}")


def _references(value: Any) -> list:
    if isinstance(value, Asset) or (isinstance(value, int) and not isinstance(value, bool)):
        return [value]
    if isinstance(value, (list, tuple)):
        return list(value)
    raise ValueError(
        f"'asset' must be an Asset, an asset id or a list of them, got {type(value).__name__}"
    )


def _text_long(value: Any) -> TextLong:
    if isinstance(value, TextLong):
        return value
    if isinstance(value, str):
        return TextLong(value)
    return TextLong(**value)
