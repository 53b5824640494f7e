"""
User Repository.

Users are created by the CLI only; the API reads them to resolve tokens
and to show authors on public entries.
"""

from sqlalchemy import or_, select

from jotter.backend.models.user import User
from jotter.backend.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_username(self, username: str) -> User | None:
        return await self._one_or_none(select(User).where(User.username == username))

    async def username_or_email_taken(self, username: str, email: str) -> bool:
        return await self._any(
            select(User.id).where(or_(User.username == username, User.email == email))
        )
