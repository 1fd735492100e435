"""Tests for the aiosqlite move and snapshot store."""

import pytest
import pytest_asyncio

from sowgame.models.actions import DefensiveMove, InvestmentMove, OffensiveMove
from sowgame.persistence.database import Database


@pytest_asyncio.fixture
async def db(tmp_path):
    database = Database(str(tmp_path / "test.db"))
    await database.connect()
    yield database
    await database.close()


@pytest.mark.asyncio
async def test_revisions_are_appended(db):
    first = [InvestmentMove(amount=40, market="stocks")]
    second = [DefensiveMove(type="insurance", market="stocks"),
              OffensiveMove(type="spy", target_player="p2", target_name="Bob")]

    assert await db.append_moves("g", "p1", 1, first) == 1
    assert await db.append_moves("g", "p1", 1, second) == 2

    revisions = await db.list_revisions("g", "p1", 1)
    assert [r["moves"] for r in revisions] == [first, second]

    latest = await db.latest_moves("g", "p1", 1)
    assert latest["revision"] == 2
    assert latest["moves"] == second


@pytest.mark.asyncio
async def test_revisions_scoped_per_player_and_week(db):
    await db.append_moves("g", "p1", 1, [DefensiveMove(type="defense")])
    assert await db.append_moves("g", "p2", 1, [DefensiveMove(type="counter")]) == 1
    assert await db.append_moves("g", "p1", 2, [DefensiveMove(type="counter")]) == 1
    assert await db.latest_moves("g", "p3", 1) is None


@pytest.mark.asyncio
async def test_economy_snapshot(db):
    assert await db.get_economy_snapshot("g", 1) is None

    await db.save_economy_snapshot("g", 1, "boom", {"stocks": 35.0})
    await db.save_economy_snapshot("g", 1, "crisis", {"stocks": -15.0})

    snap = await db.get_economy_snapshot("g", 1)
    assert snap["cycle"] == "crisis"
    assert snap["returns"] == {"stocks": -15.0}


@pytest.mark.asyncio
async def test_data_survives_reconnect(tmp_path):
    path = str(tmp_path / "persist.db")
    database = Database(path)
    await database.connect()
    await database.append_moves("g", "p1", 3, [InvestmentMove(type="hold")])
    await database.close()

    reopened = Database(path)
    await reopened.connect()
    latest = await reopened.latest_moves("g", "p1", 3)
    await reopened.close()
    assert latest["moves"] == [InvestmentMove(type="hold")]
