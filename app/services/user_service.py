from typing import Optional, Dict
from sqlalchemy import select
from app.database.connection import AsyncSessionLocal
from app.models.user import User


async def get_user_by_id(user_id: str) -> Optional[Dict]:
    """Get a live (not soft-deleted) user by ID"""
    async with AsyncSessionLocal() as session:
        result = await session.execute(
            select(User).where(User.id == user_id, User.is_deleted.is_(False))
        )
        user = result.scalar_one_or_none()

        if not user:
            return None

        return {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "role": user.role.value if hasattr(user.role, "value") else user.role,
        }
