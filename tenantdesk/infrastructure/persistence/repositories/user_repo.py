"""User repository with password and role helpers. Interface methods return application DTOs."""

from __future__ import annotations

import asyncio

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tenantdesk.application.dtos.user import UserResult
from tenantdesk.domain.exceptions import ResourceNotFoundException, ValidationException
from tenantdesk.domain.roles import Role
from tenantdesk.infrastructure.persistence.models.user import User
from tenantdesk.infrastructure.persistence.repositories.base import BaseRepository
from tenantdesk.infrastructure.security.password import get_password_hash, verify_password

# Lazy dummy hash for constant-time comparison when user is not found.
# Computed on first use in a thread to avoid blocking the event loop at import.
_dummy_hash_cache: str | None = None


async def _get_dummy_hash() -> str:
    global _dummy_hash_cache
    if _dummy_hash_cache is None:
        _dummy_hash_cache = await asyncio.to_thread(
            get_password_hash, "not-a-real-password"
        )
    return _dummy_hash_cache


def _user_to_result(u: User) -> UserResult:
    """Map ORM User to application UserResult (no password)."""
    return UserResult(
        id=u.id,
        tenant_id=u.tenant_id,
        email=u.email,
        role=u.role,
        is_active=u.is_active,
        first_name=u.first_name,
        last_name=u.last_name,
    )


class UserRepository(BaseRepository[User]):
    """User repository. Authenticate, create_user, role queries and updates."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def _get_entity(self, user_id: str, tenant_id: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.id == user_id, User.tenant_id == tenant_id)
        )
        return result.scalar_one_or_none()

    async def get_by_id_and_tenant(self, user_id: str, tenant_id: str) -> UserResult | None:
        user = await self._get_entity(user_id, tenant_id)
        return _user_to_result(user) if user else None

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def authenticate(self, email: str, password: str) -> UserResult | None:
        """Return the active user whose password matches, else None (constant-time on miss)."""
        user = await self.get_by_email(email)
        if not user:
            dummy_hash = await _get_dummy_hash()
            await asyncio.to_thread(verify_password, password, dummy_hash)
            return None
        if not user.is_active:
            return None
        if not await asyncio.to_thread(verify_password, password, user.hashed_password):
            return None
        return _user_to_result(user)

    async def create_user(
        self,
        tenant_id: str,
        email: str,
        password: str,
        role: Role,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> UserResult:
        """Create user; raise ValidationException when the email is already registered."""
        hashed = await asyncio.to_thread(get_password_hash, password)
        user = User(
            tenant_id=tenant_id,
            email=email.strip().lower(),
            hashed_password=hashed,
            role=role.value,
            first_name=first_name,
            last_name=last_name,
            is_active=True,
        )
        try:
            created = await self.create(user)
        except IntegrityError as e:
            raise ValidationException("Email is already registered", field="email") from e
        return _user_to_result(created)

    async def list_by_tenant(self, tenant_id: str) -> list[UserResult]:
        result = await self.db.execute(
            select(User).where(User.tenant_id == tenant_id).order_by(User.email)
        )
        return [_user_to_result(u) for u in result.scalars().all()]

    async def count_by_role(self, tenant_id: str) -> dict[str, int]:
        result = await self.db.execute(
            select(User.role, func.count(User.id))
            .where(User.tenant_id == tenant_id, User.is_active.is_(True))
            .group_by(User.role)
        )
        return {role: count for role, count in result.all()}

    async def count_owners(self, tenant_id: str) -> int:
        result = await self.db.execute(
            select(func.count(User.id)).where(
                User.tenant_id == tenant_id,
                User.role == Role.OWNER.value,
                User.is_active.is_(True),
            )
        )
        return result.scalar_one()

    async def set_role(self, user_id: str, tenant_id: str, role: str) -> UserResult:
        user = await self._get_entity(user_id, tenant_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        user.role = role
        updated = await self.update(user)
        return _user_to_result(updated)
