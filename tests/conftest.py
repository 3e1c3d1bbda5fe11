"""Pytest configuration and fixtures for Mood Insights MCP Server tests."""

import asyncio
from datetime import date, datetime, time, timedelta

import pytest

from mood_insights_mcp_server.config import Config, set_config
from mood_insights_mcp_server.store import close_store

BASE_DATE = date(2024, 3, 4)


@pytest.fixture
def make_record():
    """Factory for raw mood records shaped like journal documents."""

    def _make(
        member_id,
        day=0,
        primary="calm",
        intensity=5,
        energy=5,
        stress=5,
        secondary=(),
        hour=9,
    ):
        created_at = datetime.combine(BASE_DATE + timedelta(days=day), time(hour=hour))
        return {
            "memberId": member_id,
            "memberName": member_id.title(),
            "createdAt": created_at.isoformat(),
            "mood": {
                "primary": primary,
                "intensity": intensity,
                "secondary": list(secondary),
            },
            "energy": energy,
            "stress": stress,
            "content": "journal text is ignored",
        }

    return _make


@pytest.fixture
def week_of_records(make_record):
    """Three members with a full week of records each."""
    records = []
    for day in range(7):
        records.append(make_record("alice", day, "happy", 7, energy=6, stress=2 + day % 3))
        records.append(make_record("bob", day, "happy", 6, energy=5, stress=3 + day % 2))
        records.append(make_record("carol", day, "anxious", 8, energy=3, stress=8, hour=21))
    return records


@pytest.fixture
def test_config(tmp_path):
    """Install a fresh global config whose result store lives in tmp_path."""
    config = Config()
    config.storage.path = str(tmp_path / "analysis.db")
    set_config(config)

    yield config

    asyncio.run(close_store())
    set_config(None)
