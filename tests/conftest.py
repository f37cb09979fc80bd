from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Callable, List

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from rolling_target.api.routes import health, target
from rolling_target.domain.models import Trade
from rolling_target.infrastructure.db.database import Base, get_db
from rolling_target.infrastructure.db import models  # noqa: F401


@pytest.fixture()
async def db_engine(tmp_path):
    db_path = tmp_path / "test.db"
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{db_path}",
        future=True,
        echo=False
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    session_maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session


@pytest.fixture()
async def app(db_session) -> FastAPI:
    app = FastAPI()
    app.include_router(health.router, tags=["Health"])
    app.include_router(target.router, prefix="/api/v1/rolling-target", tags=["Rolling Target"])

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture()
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# Trade builders
@pytest.fixture
def start_day() -> datetime:
    """Monday, mid-session UTC"""
    return datetime(2026, 3, 2, 14, 0, tzinfo=timezone.utc)


@pytest.fixture
def daily_trades(start_day) -> Callable[[List[float]], List[Trade]]:
    """One closed trade per consecutive calendar day with the given P&L values"""
    def build(pnls: List[float]) -> List[Trade]:
        return [
            Trade(closed_at=start_day + timedelta(days=i), profit_loss=pnl)
            for i, pnl in enumerate(pnls)
        ]
    return build
