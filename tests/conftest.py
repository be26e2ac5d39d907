import itertools
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ["SHIPSHAPE_TIMEZONE"] = "UTC"
os.environ["SHIPSHAPE_SEED_DEMO_DATA"] = "false"
os.environ.pop("SHIPSHAPE_WEEK_STARTS_ON", None)

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from core.database import Base  # noqa: E402
import models.storage_slot  # noqa: E402,F401
from services.config_service import set_week_starts_on  # noqa: E402
from services.storage_service import KeyValueStorage  # noqa: E402
from services.warehouse_service import WarehouseService  # noqa: E402


class FixedClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture(autouse=True)
def reset_week_start():
    set_week_starts_on(None)
    yield
    set_week_starts_on(None)


@pytest.fixture(scope="function")
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def storage(session_factory):
    return KeyValueStorage(session_factory)


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 7, 24, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def make_warehouse(storage, clock):
    counter = itertools.count(1)
    created = []

    def _make(**kwargs) -> WarehouseService:
        kwargs.setdefault("clock", clock)
        kwargs.setdefault("id_factory", lambda: f"id-{next(counter)}")
        warehouse = WarehouseService(storage, **kwargs)
        created.append(warehouse)
        return warehouse

    yield _make
    for warehouse in created:
        warehouse.close()


@pytest.fixture
def warehouse(make_warehouse):
    return make_warehouse(context_id="tab-a")
