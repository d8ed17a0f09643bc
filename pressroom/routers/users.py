from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pressroom.database import get_db
from pressroom.schemas import NotificationResponse
from pressroom.services import notification_service

router = APIRouter(prefix="/users", tags=["users"])

@router.get("/{user_id}/notifications", response_model=list[NotificationResponse])
async def list_notifications(user_id: str, db: AsyncSession = Depends(get_db)):
    return await notification_service.list_notifications(db, user_id)
