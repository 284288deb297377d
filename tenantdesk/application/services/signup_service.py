"""Owner signup: creates a tenant and its first user with the Owner role."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from tenantdesk.application.dtos.tenant import RegistrationResult
from tenantdesk.application.interfaces.repositories import ITenantRepository
from tenantdesk.application.services.pending_signup_store import PendingSignupStore
from tenantdesk.domain.roles import Role

if TYPE_CHECKING:
    from tenantdesk.infrastructure.persistence.repositories import UserRepository

logger = logging.getLogger(__name__)


def _fallback_company_name(email: str) -> str:
    return f"{email.split('@', 1)[0]}'s Company"


class SignupService:
    """Registers a new account. The company name comes from the request or the pending store."""

    def __init__(
        self,
        tenant_repo: ITenantRepository,
        user_repo: UserRepository,
        pending_store: PendingSignupStore,
        create_token: Callable[[str, str], str],
    ) -> None:
        self.tenant_repo = tenant_repo
        self.user_repo = user_repo
        self.pending_store = pending_store
        self.create_token = create_token

    async def register_owner(
        self,
        email: str,
        password: str,
        company_name: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> RegistrationResult:
        """Create tenant and Owner user; return both plus an access token.

        Caller must run this within a single DB transaction so tenant and
        owner are created atomically. The pending entry for email is removed
        only after the owner exists, even when company_name is given explicitly.
        """
        pending = await self.pending_store.get(email)
        name = (
            company_name
            or (pending or {}).get("company_name")
            or _fallback_company_name(email)
        )
        tenant = await self.tenant_repo.create_tenant(name)
        owner = await self.user_repo.create_user(
            tenant_id=tenant.id,
            email=email,
            password=password,
            role=Role.OWNER,
            first_name=first_name,
            last_name=last_name,
        )
        await self.pending_store.discard(email)
        logger.info("Tenant registered: tenant=%s owner=%s", tenant.id, owner.id)
        token = self.create_token(owner.id, tenant.id)
        return RegistrationResult(
            tenant=tenant,
            owner_id=owner.id,
            owner_email=owner.email,
            access_token=token,
        )
