"""Shared test fixtures."""

import mlflow
import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from agriadvisor.storage import db


@pytest.fixture(autouse=True)
def _disable_mlflow_tracing():
    """Disable MLflow tracing during tests so nothing is written to mlruns/."""
    mlflow.tracing.disable()
    yield
    mlflow.tracing.enable()


@pytest.fixture
async def sqlite_db(tmp_path):
    """Point the storage layer at a fresh SQLite file for one test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'agri_ai_test.db'}")
    db._engine = engine
    db._session_factory = None
    await db.init_db()
    yield engine
    await engine.dispose()
    db._engine = None
    db._session_factory = None
