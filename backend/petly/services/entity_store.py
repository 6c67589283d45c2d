"""
Petly Backend: Generic Entity Store
=====================================

What:  One data-access component shared by shelters, adopters and adoptable
       dogs. Subclasses only declare their table shape; every query is
       assembled here.
How:   Parameterized SQL with positional placeholders, executed through
       QueryExecutor. Columns are projected as `column AS "externalName"`
       so rows leave the store already in API (camelCase) naming.
Who:   Instantiated per request by route handlers (see petly/services/stores.py
       for the concrete stores) and by the merger for local lookups.

Declaring a store:
    table            storage table name
    table_alias      alias used in SELECTs (needed when joining)
    fields           external names in output order; `id` comes first
    field_aliases    external → storage column, for names that differ
    creatable        fields accepted by create(), in INSERT column order
    updatable        fields accepted by update()
    defaults         values used by create() when a field is missing or None
    search_filters   SearchFilter declarations, applied in declaration order
    order_by         ORDER BY expression (display key, then id)
    boolean_fields   coerced to bool on read-back (SQLite returns 0/1)
    tristate_fields  coerced to Optional[bool] on input and read-back

Identity:
    A plain int (or LocalId) addresses a row by primary key. Credentialed
    stores also accept a str, which addresses a row by username.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from sqlalchemy.exc import IntegrityError

from petly.exceptions import (
    DuplicateError,
    NotFoundError,
    PetlyError,
    UnauthorizedError,
    ValidationError,
)
from petly.services.identity import LocalId
from petly.services.partial_update import sql_for_partial_update
from petly.services.passwords import dummy_hash, hash_password, verify_password
from petly.services.query import QueryExecutor, Row
from petly.services.tristate import coerce_tristate

logger = logging.getLogger(__name__)

Identity = Union[int, str, LocalId]


@dataclass(frozen=True)
class SearchFilter:
    """
    One optional search filter.

    kind:
        "text"  case-insensitive partial match
        "exact" equality
        "id"    equality against an integer column; a non-numeric value
                cannot match any local row
        "flag"  tri-state value coerced to bool, then equality
    """

    name: str
    column: str
    kind: str = "text"


class _NoLocalMatch(Exception):
    """A filter value that no local row can satisfy."""


# ══════════════════════════════════════════════════════════════════════════
# Entity Store
# ══════════════════════════════════════════════════════════════════════════

class EntityStore:
    resource: str = "record"
    table: str = ""
    table_alias: str = ""
    fields: Tuple[str, ...] = ("id",)
    field_aliases: Dict[str, str] = {}
    creatable: Tuple[str, ...] = ()
    updatable: Tuple[str, ...] = ()
    search_filters: Tuple[SearchFilter, ...] = ()
    order_by: str = "id"
    boolean_fields: Tuple[str, ...] = ()
    tristate_fields: Tuple[str, ...] = ()

    def __init__(self, db: QueryExecutor):
        self.db = db

    # ── SQL fragments ─────────────────────────────────────────────────────

    def defaults(self) -> Dict[str, Any]:
        return {}

    def column_for(self, name: str) -> str:
        return self.field_aliases.get(name, name)

    def _qualify(self, column: str) -> str:
        return f"{self.table_alias}.{column}" if self.table_alias else column

    def projection(self, qualified: bool = True) -> str:
        """`col AS "name"` for every field, optionally table-qualified."""
        parts = []
        for name in self.fields:
            column = self.column_for(name)
            if qualified:
                column = self._qualify(column)
            parts.append(f'{column} AS "{name}"')
        return ", ".join(parts)

    def select_sql(self) -> str:
        source = f"{self.table} {self.table_alias}" if self.table_alias else self.table
        return f"SELECT {self.projection()} FROM {source}"

    def _key_for(self, identity: Identity) -> Tuple[str, Any]:
        """Storage column and bound value addressing one row."""
        if isinstance(identity, LocalId):
            return "id", identity.value
        if isinstance(identity, int) and not isinstance(identity, bool):
            return "id", identity
        raise ValidationError(
            message=f"{self.resource} ids are integers",
            context={"identity": str(identity)},
        )

    # ── Read-back normalization ───────────────────────────────────────────

    def _present(self, row: Row) -> Row:
        record = dict(row)
        for name in self.boolean_fields:
            if record.get(name) is not None:
                record[name] = bool(record[name])
        for name in self.tristate_fields:
            if name in record:
                record[name] = coerce_tristate(record[name])
        return record

    def _coerce_input(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        prepared = dict(data)
        for name in self.tristate_fields:
            if name in prepared:
                try:
                    prepared[name] = coerce_tristate(prepared[name])
                except ValueError as e:
                    raise ValidationError(message=str(e), field=name)
        return prepared

    async def _complete(self, record: Row) -> Row:
        """Hook run on rows read back from INSERT/UPDATE ... RETURNING."""
        return record

    async def _hydrate(self, record: Row) -> Row:
        """Hook attaching the related collection on single-record reads."""
        return record

    def _integrity_error(self, exc: IntegrityError) -> PetlyError:
        detail = str(exc.orig).lower()
        if "unique" in detail or "duplicate" in detail:
            return DuplicateError(f"Duplicate {self.resource}")
        return ValidationError(
            message=f"Invalid reference or missing field for {self.resource}",
            context={"error_type": type(exc.orig).__name__},
        )

    # ══════════════════════════════════════════════════════════════════════
    # Operations
    # ══════════════════════════════════════════════════════════════════════

    async def create(self, data: Mapping[str, Any]) -> Row:
        """
        Insert one row and return it (generated id included, never a password).

        Fields missing from `data` (or given as None) take `defaults()`;
        tri-state flags with no value stay unknown.

        Raises:
            ValidationError: unknown field, bad tri-state value, bad reference
            DuplicateError:  uniqueness violation at insert
        """
        unknown = sorted(set(data) - set(self.creatable))
        if unknown:
            raise ValidationError(
                message=f"Unknown {self.resource} field(s): {', '.join(unknown)}",
                context={"fields": unknown},
            )

        prepared = self._coerce_input(data)
        defaults = self.defaults()
        values = []
        for name in self.creatable:
            value = prepared.get(name)
            if value is None:
                value = defaults.get(name)
            values.append(value)

        columns = ", ".join(self.column_for(name) for name in self.creatable)
        placeholders = ", ".join(f"${i}" for i in range(1, len(values) + 1))
        sql = (
            f"INSERT INTO {self.table} ({columns}) VALUES ({placeholders}) "
            f"RETURNING {self.projection(qualified=False)}"
        )
        try:
            rows = await self.db.mutate(sql, values)
        except IntegrityError as e:
            logger.info("Rejected %s insert: %s", self.resource, e.orig)
            raise self._integrity_error(e)

        record = await self._complete(self._present(rows[0]))
        logger.info("Created %s %s", self.resource, record["id"])
        return record

    async def find_all(self, filters: Optional[Mapping[str, Any]] = None) -> List[Row]:
        """
        Rows matching every present filter, ordered by the display key.

        None and empty-string values are ignored. No match yields [].

        Raises:
            ValidationError: unknown filter name or unparseable flag value
        """
        filters = dict(filters or {})
        declared = {search_filter.name for search_filter in self.search_filters}
        unknown = sorted(name for name in filters if name not in declared)
        if unknown:
            raise ValidationError(
                message=f"Unknown {self.resource} filter(s): {', '.join(unknown)}",
                context={"filters": unknown},
            )

        try:
            where, values = self._where_clause(filters)
        except _NoLocalMatch:
            return []

        sql = self.select_sql()
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += f" ORDER BY {self.order_by}"

        rows = await self.db.execute(sql, values)
        return [self._present(row) for row in rows]

    def _where_clause(self, filters: Mapping[str, Any]) -> Tuple[List[str], List[Any]]:
        where: List[str] = []
        values: List[Any] = []
        for search_filter in self.search_filters:
            value = filters.get(search_filter.name)
            if value is None or value == "":
                continue

            if search_filter.kind == "flag":
                try:
                    value = coerce_tristate(value)
                except ValueError as e:
                    raise ValidationError(message=str(e), field=search_filter.name)
                if value is None:
                    continue
            elif search_filter.kind == "id":
                if isinstance(value, str):
                    if not value.isdigit():
                        raise _NoLocalMatch()
                    value = int(value)

            if search_filter.kind == "text":
                values.append(f"%{value}%")
                where.append(f"LOWER({search_filter.column}) LIKE LOWER(${len(values)})")
            else:
                values.append(value)
                where.append(f"{search_filter.column} = ${len(values)}")
        return where, values

    async def lookup(self, identity: Identity, hydrate: bool = True) -> Optional[Row]:
        """Non-raising get(): None when no row matches."""
        column, key = self._key_for(identity)
        rows = await self.db.execute(
            f"{self.select_sql()} WHERE {self._qualify(column)} = $1", [key]
        )
        if not rows:
            return None
        record = self._present(rows[0])
        if hydrate:
            record = await self._hydrate(record)
        return record

    async def get(self, identity: Identity) -> Row:
        """
        One row with its related collection attached.

        Raises:
            NotFoundError: no row matches `identity`
        """
        record = await self.lookup(identity)
        if record is None:
            raise NotFoundError(resource=self.resource, resource_id=str(identity))
        return record

    async def update(self, identity: Identity, data: Mapping[str, Any]) -> Row:
        """
        Apply a partial update and return the updated row.

        Existence is decided by the UPDATE's own RETURNING result.

        Raises:
            InvalidUpdateError: `data` is empty
            ValidationError:    a field is not updatable
            NotFoundError:      no row matches `identity`
            DuplicateError:     uniqueness violation
        """
        not_updatable = sorted(set(data) - set(self.updatable))
        if not_updatable:
            raise ValidationError(
                message=f"Cannot update {self.resource} field(s): {', '.join(not_updatable)}",
                context={"fields": not_updatable},
            )

        update = sql_for_partial_update(self._coerce_input(data), self.field_aliases)
        column, key = self._key_for(identity)
        sql = (
            f"UPDATE {self.table} SET {update.set_clause} "
            f"WHERE {column} = ${update.next_placeholder} "
            f"RETURNING {self.projection(qualified=False)}"
        )
        try:
            rows = await self.db.mutate(sql, [*update.values, key])
        except IntegrityError as e:
            raise self._integrity_error(e)

        if not rows:
            raise NotFoundError(resource=self.resource, resource_id=str(identity))
        logger.info("Updated %s %s: %s", self.resource, identity, ", ".join(data))
        return await self._complete(self._present(rows[0]))

    async def remove(self, identity: Identity) -> Dict[str, str]:
        """
        Delete one row.

        Returns:
            {"deleted": "<identity>"}

        Raises:
            NotFoundError: no row matches `identity`
        """
        column, key = self._key_for(identity)
        rows = await self.db.mutate(
            f"DELETE FROM {self.table} WHERE {column} = $1 RETURNING id", [key]
        )
        if not rows:
            raise NotFoundError(resource=self.resource, resource_id=str(identity))
        logger.info("Deleted %s %s", self.resource, identity)
        return {"deleted": str(identity)}


# ══════════════════════════════════════════════════════════════════════════
# Credentialed Store (shelters, adopters)
# ══════════════════════════════════════════════════════════════════════════

class CredentialedStore(EntityStore):
    """
    Adds username addressing, password hashing and authentication.

    The password hash is written on create/update_password and read only
    by authenticate(); it never appears in a returned record.
    """

    def _key_for(self, identity: Identity) -> Tuple[str, Any]:
        if isinstance(identity, str):
            return "username", identity
        return super()._key_for(identity)

    async def _username_taken(self, username: str) -> bool:
        rows = await self.db.execute(
            f"SELECT id FROM {self.table} WHERE username = $1", [username]
        )
        return bool(rows)

    async def create(self, data: Mapping[str, Any]) -> Row:
        username = data.get("username")
        if username and await self._username_taken(username):
            raise DuplicateError(f"Duplicate {self.resource} username: {username}")

        prepared = dict(data)
        if prepared.get("password") is None:
            raise ValidationError(message="A password is required", field="password")
        prepared["password"] = await hash_password(prepared["password"])
        return await super().create(prepared)

    async def authenticate(self, username: str, password: str) -> Row:
        """
        Verify credentials and return the public profile.

        Raises:
            UnauthorizedError: unknown username or wrong password (same message)
        """
        rows = await self.db.execute(
            f'SELECT password AS "passwordHash", {self.projection(qualified=False)} '
            f"FROM {self.table} WHERE username = $1",
            [username],
        )
        if rows:
            record = dict(rows[0])
            stored = record.pop("passwordHash")
        else:
            record = None
            stored = await asyncio.to_thread(dummy_hash)

        valid = await verify_password(password, stored)
        if record is None or not valid:
            logger.info("Failed %s login for '%s'", self.resource, username)
            raise UnauthorizedError("Invalid username/password")
        return self._present(record)

    async def update_password(self, identity: Identity, password: str) -> Dict[str, str]:
        """
        Re-hash and store a new password.

        Raises:
            NotFoundError: no row matches `identity`
        """
        hashed = await hash_password(password)
        column, key = self._key_for(identity)
        rows = await self.db.mutate(
            f"UPDATE {self.table} SET password = $1 WHERE {column} = $2 RETURNING id",
            [hashed, key],
        )
        if not rows:
            raise NotFoundError(resource=self.resource, resource_id=str(identity))
        logger.info("Password updated for %s %s", self.resource, identity)
        return {"updated": str(identity)}

