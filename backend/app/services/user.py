"""User service - identity lookups and account creation."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import User
from app.services.errors import NotFoundError


class UserService:
    """Service for reading and creating user accounts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_email(self, email: str) -> User | None:
        """Get a user by (already normalized) email."""
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get(self, user_id: int) -> User | None:
        """Get a user by ID."""
        return await self.db.get(User, user_id)

    async def create(
        self,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
    ) -> User:
        """Create a new user. Uniqueness is enforced by the database."""
        user = User(
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
        )
        self.db.add(user)
        await self.db.flush()
        # Load server-generated timestamps
        await self.db.refresh(user)
        return user

    async def get_profile(self, user_id: int) -> User:
        """Get a user for profile display.

        Raises:
            NotFoundError: If the user does not exist.
        """
        user = await self.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user
