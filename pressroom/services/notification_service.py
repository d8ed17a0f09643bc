from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pressroom.errors import StoreError
from pressroom.models import Notification


async def list_notifications(db: AsyncSession, user_id: str) -> list[Notification]:
    """Notifications addressed to *user_id*, newest first."""
    q = (
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(desc(Notification.created_at), desc(Notification.id))
    )
    try:
        result = await db.execute(q)
    except SQLAlchemyError as exc:
        raise StoreError.wrap(exc) from exc
    return list(result.scalars().all())
