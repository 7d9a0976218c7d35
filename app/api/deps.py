from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_session
from app.models.barber import Barber
from app.services.catalog_service import get_barber

__all__ = ["get_session", "get_barber_or_404"]


async def get_barber_or_404(
    barber_id: str,
    session: AsyncSession = Depends(get_session),
) -> Barber:
    barber = await get_barber(session, barber_id)
    if not barber:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Barber profile not found.",
        )
    return barber
