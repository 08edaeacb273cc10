"""Shared API dependencies"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from robs.database import get_db
from robs.services.events import EventPublisher, get_event_publisher
from robs.services.lifecycle import LifecycleCoordinator


async def get_coordinator(
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> LifecycleCoordinator:
    return LifecycleCoordinator(db, publisher)
