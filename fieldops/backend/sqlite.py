"""SQLite implementation of the backend collaborator."""
import json
import logging
import re
import uuid
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import aiosqlite

from fieldops.backend.base import (
    Backend, ChangeEvent, ChangeFeed, Listener, Query, Subscription,
    INSERT, UPDATE, DELETE,
)
from fieldops.database import get_db
from fieldops.exceptions import BackendError

logger = logging.getLogger('sqlite_backend')

_IDENTIFIER = re.compile(r'^[a-z_][a-z0-9_]*$')

_OPERATORS = {'eq': '=', 'gte': '>=', 'lte': '<='}

# Columns stored as JSON text
JSON_COLUMNS = {
    'users': {'assigned_regions'},
}


def _now() -> str:
    return datetime.now().strftime('%Y-%m-%d %H:%M:%S')


def _translate_error(exc: Exception) -> BackendError:
    """Map a SQLite error onto a machine-readable backend error."""
    text = str(exc)
    if isinstance(exc, aiosqlite.IntegrityError):
        if 'FOREIGN KEY' in text:
            return BackendError(text, 'foreign_key_violation')
        if 'UNIQUE' in text:
            return BackendError(text, 'unique_violation')
        if 'NOT NULL' in text:
            return BackendError(text, 'not_null_violation')
        return BackendError(text, 'check_violation')
    return BackendError(text, 'unavailable')


class SQLiteBackend(Backend):
    """Backend over a local SQLite file with an in-process change feed."""

    def __init__(self, database_path: Optional[str] = None):
        self.database_path = database_path
        self.feed = ChangeFeed()
        self._columns: Dict[str, List[str]] = {}
        self._procedures = {
            'create_report': self._create_report,
        }

    async def _table_columns(self, db: aiosqlite.Connection, collection: str) -> List[str]:
        if collection in self._columns:
            return self._columns[collection]
        if not _IDENTIFIER.match(collection or ''):
            raise BackendError(f"Invalid collection name: {collection!r}", 'invalid_query')
        async with db.execute(f"PRAGMA table_info({collection})") as cursor:
            columns = [row[1] for row in await cursor.fetchall()]
        if not columns:
            raise BackendError(f"Unknown collection: {collection}", 'invalid_query')
        self._columns[collection] = columns
        return columns

    @staticmethod
    def _check_columns(collection: str, known: List[str], names: Iterable[str]):
        for name in names:
            if name not in known:
                raise BackendError(f"Unknown column {name!r} on {collection}", 'invalid_query')

    @staticmethod
    def _encode(collection: str, row: dict) -> dict:
        encoded = dict(row)
        for column in JSON_COLUMNS.get(collection, ()):
            if column in encoded and encoded[column] is not None:
                encoded[column] = json.dumps(encoded[column])
        return encoded

    @staticmethod
    def _decode(collection: str, row) -> dict:
        decoded = dict(row)
        for column in JSON_COLUMNS.get(collection, ()):
            if decoded.get(column):
                decoded[column] = json.loads(decoded[column])
        return decoded

    async def _fetch_by_id(self, db: aiosqlite.Connection, collection: str, record_id: str) -> Optional[dict]:
        async with db.execute(f"SELECT * FROM {collection} WHERE id = ?", (record_id,)) as cursor:
            row = await cursor.fetchone()
        return self._decode(collection, row) if row else None

    async def _insert_row(self, db: aiosqlite.Connection, collection: str, row: dict) -> dict:
        columns = await self._table_columns(db, collection)
        record = self._encode(collection, {k: v for k, v in row.items() if v is not None})
        record.setdefault('id', str(uuid.uuid4()))
        if 'created_at' in columns:
            record.setdefault('created_at', _now())
        self._check_columns(collection, columns, record)

        names = list(record)
        placeholders = ', '.join('?' for _ in names)
        await db.execute(
            f"INSERT INTO {collection} ({', '.join(names)}) VALUES ({placeholders})",
            [record[name] for name in names]
        )
        return await self._fetch_by_id(db, collection, record['id'])

    async def select(self, query: Query) -> List[dict]:
        try:
            async with get_db(self.database_path) as db:
                columns = await self._table_columns(db, query.collection)
                sql = f"SELECT * FROM {query.collection}"
                clauses = []
                params: List[Any] = []

                for column, op, value in query.filters:
                    self._check_columns(query.collection, columns, [column])
                    if op == 'in':
                        if not value:
                            # Empty IN list matches nothing
                            clauses.append('0')
                            continue
                        clauses.append(f"{column} IN ({', '.join('?' for _ in value)})")
                        params.extend(value)
                    elif op in _OPERATORS:
                        clauses.append(f"{column} {_OPERATORS[op]} ?")
                        params.append(value)
                    else:
                        raise BackendError(f"Unsupported operator: {op}", 'invalid_query')

                if clauses:
                    sql += " WHERE " + " AND ".join(clauses)
                if query.order_by:
                    column, descending = query.order_by
                    self._check_columns(query.collection, columns, [column])
                    sql += f" ORDER BY {column} {'DESC' if descending else 'ASC'}"
                if query.limit_count is not None:
                    sql += " LIMIT ?"
                    params.append(query.limit_count)

                async with db.execute(sql, params) as cursor:
                    rows = await cursor.fetchall()
        except aiosqlite.Error as exc:
            raise _translate_error(exc) from exc

        return [self._decode(query.collection, row) for row in rows]

    async def insert(self, collection: str, row: dict) -> dict:
        try:
            async with get_db(self.database_path) as db:
                record = await self._insert_row(db, collection, row)
                await db.commit()
        except aiosqlite.Error as exc:
            raise _translate_error(exc) from exc

        logger.info(f"Inserted {collection} row {record['id']}")
        await self.feed.publish(ChangeEvent(INSERT, collection, record['id']))
        return record

    async def update(self, collection: str, record_id: str, changes: dict) -> dict:
        changes = {k: v for k, v in changes.items() if k != 'id'}
        if not changes:
            raise BackendError("No fields to update", 'invalid_query')

        try:
            async with get_db(self.database_path) as db:
                columns = await self._table_columns(db, collection)
                self._check_columns(collection, columns, changes)
                encoded = self._encode(collection, changes)

                assignments = ', '.join(f"{name} = ?" for name in encoded)
                cursor = await db.execute(
                    f"UPDATE {collection} SET {assignments} WHERE id = ?",
                    [*encoded.values(), record_id]
                )
                if cursor.rowcount == 0:
                    raise BackendError(f"{collection} row {record_id} not found", 'not_found')
                await db.commit()
                record = await self._fetch_by_id(db, collection, record_id)
        except aiosqlite.Error as exc:
            raise _translate_error(exc) from exc

        logger.info(f"Updated {collection} row {record_id}")
        await self.feed.publish(ChangeEvent(UPDATE, collection, record_id))
        return record

    async def delete(self, collection: str, record_id: str) -> None:
        try:
            async with get_db(self.database_path) as db:
                await self._table_columns(db, collection)
                cursor = await db.execute(f"DELETE FROM {collection} WHERE id = ?", (record_id,))
                if cursor.rowcount == 0:
                    raise BackendError(f"{collection} row {record_id} not found", 'not_found')
                await db.commit()
        except aiosqlite.Error as exc:
            raise _translate_error(exc) from exc

        logger.info(f"Deleted {collection} row {record_id}")
        await self.feed.publish(ChangeEvent(DELETE, collection, record_id))

    def subscribe(self, collection: str, listener: Listener,
                  events: Optional[Iterable[str]] = None) -> Subscription:
        return self.feed.subscribe(collection, listener, events)

    async def rpc(self, name: str, params: dict) -> Any:
        procedure = self._procedures.get(name)
        if procedure is None:
            raise BackendError(f"Unknown procedure: {name}", 'invalid_query')
        return await procedure(params)

    async def _create_report(self, params: dict) -> dict:
        """Insert a report with its worker and equipment links in one transaction."""
        report = dict(params.get('report') or {})
        workers = [dict(item) for item in params.get('workers') or []]
        equipment = [dict(item) for item in params.get('equipment') or []]

        if report.get('total_fuel') is None:
            report['total_fuel'] = sum(float(item.get('fuel_amount') or 0) for item in equipment)

        try:
            async with get_db(self.database_path) as db:
                try:
                    if report.get('total_worker_salary') is None:
                        report['total_worker_salary'] = await self._sum_worker_salaries(
                            db, [item.get('worker_id') for item in workers]
                        )
                    record = await self._insert_row(db, 'reports', report)
                    linked_workers = [
                        await self._insert_row(db, 'report_workers', {**item, 'report_id': record['id']})
                        for item in workers
                    ]
                    linked_equipment = [
                        await self._insert_row(db, 'report_equipment', {**item, 'report_id': record['id']})
                        for item in equipment
                    ]
                    await db.commit()
                except Exception:
                    await db.rollback()
                    raise
        except aiosqlite.Error as exc:
            raise _translate_error(exc) from exc

        logger.info(
            f"Created report {record['id']} with {len(linked_workers)} workers "
            f"and {len(linked_equipment)} equipment"
        )
        await self.feed.publish(ChangeEvent(INSERT, 'reports', record['id']))
        for link in linked_workers:
            await self.feed.publish(ChangeEvent(INSERT, 'report_workers', link['id']))
        for link in linked_equipment:
            await self.feed.publish(ChangeEvent(INSERT, 'report_equipment', link['id']))

        record['workers'] = linked_workers
        record['equipment'] = linked_equipment
        return record

    @staticmethod
    async def _sum_worker_salaries(db: aiosqlite.Connection, worker_ids: List[str]) -> float:
        worker_ids = [worker_id for worker_id in worker_ids if worker_id]
        if not worker_ids:
            return 0.0
        async with db.execute(
            f"SELECT COALESCE(SUM(daily_salary), 0) AS total FROM workers "
            f"WHERE id IN ({', '.join('?' for _ in worker_ids)})",
            worker_ids
        ) as cursor:
            row = await cursor.fetchone()
        return float(row['total'] or 0)
