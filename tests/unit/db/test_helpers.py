from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import psycopg
import pytest

from aggie_nexus.db.helpers import DatabaseError, execute_query, fetch_one, fetch_val

HELPERS = "aggie_nexus.db.helpers"


class FakeCursor:
    def __init__(self, row):
        self.row = row
        self.executed = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def execute(self, query, params):
        self.executed.append((query, params))

    async def fetchone(self):
        return self.row


class FakePool:
    def __init__(self, conn):
        self.conn = conn
        self.borrowed = 0

    @asynccontextmanager
    async def connection(self):
        self.borrowed += 1
        yield self.conn


def make_conn(row=None, rowcount=0):
    conn = MagicMock()
    conn.cursor.return_value = FakeCursor(row)
    conn.execute = AsyncMock(return_value=MagicMock(rowcount=rowcount))
    return conn


@pytest.mark.asyncio
async def test_fetch_one_borrows_pool_connection(monkeypatch):
    pool = FakePool(make_conn(row={"id": "user-123"}))
    monkeypatch.setattr(f"{HELPERS}.db_pool", pool)

    row = await fetch_one("SELECT id FROM users WHERE id = %s", ("user-123",))

    assert row == {"id": "user-123"}
    assert pool.borrowed == 1


@pytest.mark.asyncio
async def test_fetch_val_returns_first_column(monkeypatch):
    monkeypatch.setattr(f"{HELPERS}.db_pool", FakePool(make_conn(row={"role": "admin"})))

    assert await fetch_val("SELECT role FROM users WHERE id = %s", ("user-123",)) == "admin"


@pytest.mark.asyncio
async def test_execute_query_uses_given_connection(monkeypatch):
    pool = FakePool(make_conn())
    monkeypatch.setattr(f"{HELPERS}.db_pool", pool)
    conn = make_conn(rowcount=2)

    affected = await execute_query("DELETE FROM organization_managers", connection=conn)

    assert affected == 2
    assert pool.borrowed == 0


@pytest.mark.asyncio
async def test_driver_errors_become_database_errors(monkeypatch):
    conn = make_conn()
    conn.execute = AsyncMock(side_effect=psycopg.OperationalError("server closed"))
    monkeypatch.setattr(f"{HELPERS}.db_pool", FakePool(conn))

    with pytest.raises(DatabaseError) as exc_info:
        await execute_query("UPDATE users SET role = %s", ("manager",))

    assert exc_info.value.operation == "execute"
