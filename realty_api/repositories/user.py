"""
User repository for staff records.
Listing and search only ever return active users; lookups by id and email see everyone.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, and_, or_, desc, false, column, String
from realty_api.repositories.base import BaseRepository
from realty_api.models.user import User, UserRole, Department
from typing import Optional, List, Tuple
import uuid
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for staff user records."""

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Find a user by email, active or not. Emails are stored lowercased."""
        return await self.get_by_field("email", email.strip().lower())

    async def email_taken(self, email: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        """Whether a user other than `exclude_id` already has this email."""
        existing = await self.get_by_email(email)
        return existing is not None and existing.id != exclude_id

    async def list_active(self) -> List[User]:
        """All active users, in insertion order."""
        return await self.get_multi(filters={"is_active": True}, order_by="created_at")

    async def list_active_page(self, skip: int, limit: int) -> Tuple[List[User], int]:
        """One page of active users, newest first, with the active total."""
        filters = {"is_active": True}
        total = await self.count(filters)
        users = await self.get_multi(skip=skip, limit=limit, filters=filters, order_by="-created_at")
        return users, total

    async def search(
        self,
        query: Optional[str] = None,
        role: Optional[str] = None,
        department: Optional[str] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> Tuple[List[User], int]:
        """
        Search active users.

        `query` matches name, email, bio or any skill, case-insensitively.
        `role` and `department` are exact; "all" or empty disables the filter.

        Returns:
            Tuple of (users list, total count)
        """
        try:
            conditions = self._build_filter_conditions(query, role, department)

            count_query = select(func.count(User.id)).where(and_(*conditions))
            total_count = (await self.db.execute(count_query)).scalar_one()

            stmt = (
                select(User)
                .where(and_(*conditions))
                .order_by(desc(User.created_at))
                .offset(skip)
                .limit(limit)
            )
            result = await self.db.execute(stmt)
            users = list(result.scalars().all())

            logger.debug(f"User search returned {len(users)} of {total_count} total results")
            return users, total_count
        except Exception as e:
            logger.error(f"Failed to search users: {e}")
            raise

    def _build_filter_conditions(
        self,
        query: Optional[str],
        role: Optional[str],
        department: Optional[str],
    ) -> List:
        conditions = [User.is_active == True]  # noqa: E712

        if query:
            conditions.append(
                or_(
                    User.name.icontains(query, autoescape=True),
                    User.email.icontains(query, autoescape=True),
                    User.bio.icontains(query, autoescape=True),
                    self._skill_matches(query),
                )
            )

        if role and role != "all":
            try:
                conditions.append(User.role == UserRole(role))
            except ValueError:
                conditions.append(false())

        if department and department != "all":
            try:
                conditions.append(User.department == Department(department))
            except ValueError:
                conditions.append(false())

        return conditions

    def _skill_matches(self, query: str):
        """EXISTS over the elements of the skills array, matching any single entry."""
        if self.db.get_bind().dialect.name == "postgresql":
            skills = func.json_array_elements_text(User.skills).table_valued(column("value", String))
        else:
            skills = func.json_each(User.skills).table_valued(column("value", String))
        return (
            select(skills.c.value)
            .where(skills.c.value.icontains(query, autoescape=True))
            .exists()
        )
