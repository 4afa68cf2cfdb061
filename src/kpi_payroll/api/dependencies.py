"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kpi_payroll.database import init_db


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the global session factory."""
    _, factory = init_db()
    return factory


async def get_db_session(
    factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
) -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async with factory() as session:
        try:
            yield session
        finally:
            await session.close()


@dataclass(frozen=True)
class Actor:
    """The user performing a request, as forwarded by the gateway."""

    id: str | None
    role: str | None


async def get_actor(
    x_actor_id: Annotated[str | None, Header()] = None,
    x_actor_role: Annotated[str | None, Header()] = None,
) -> Actor:
    """Extract the acting user from headers."""
    return Actor(id=x_actor_id, role=x_actor_role.strip().lower() if x_actor_role else None)


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
SessionFactory = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)]
CurrentActor = Annotated[Actor, Depends(get_actor)]
