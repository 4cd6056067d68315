"""
Shared fixtures: a throwaway SQLite database per test
"""

import asyncio

import pytest

from app.core.db import ConnectionPool


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'test_events.db'}"


@pytest.fixture
def run_db(database_url):
    """Run ``scenario(db)`` against a fresh database inside its own event loop"""
    def runner(scenario):
        async def main():
            pool = ConnectionPool(database_url)
            try:
                async with pool.session() as db:
                    return await scenario(db)
            finally:
                await pool.dispose()

        return asyncio.run(main())

    return runner
