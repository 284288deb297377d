"""Adding team members and shops within plan limits."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tenantdesk.application.dtos.user import UserResult
from tenantdesk.application.services.limits_service import LimitsService
from tenantdesk.domain.enums import PlanFeature
from tenantdesk.domain.exceptions import AuthorizationException, ValidationException
from tenantdesk.domain.roles import Role, parse_role

if TYPE_CHECKING:
    from tenantdesk.infrastructure.persistence.repositories import (
        ShopRepository,
        UserRepository,
    )

logger = logging.getLogger(__name__)


class TeamService:
    """Creates users and shops after checking the tenant's plan and limits."""

    def __init__(
        self,
        limits_service: LimitsService,
        user_repo: UserRepository | None = None,
        shop_repo: ShopRepository | None = None,
    ) -> None:
        self.limits_service = limits_service
        self.user_repo = user_repo
        self.shop_repo = shop_repo

    async def add_member(
        self,
        actor: UserResult,
        email: str,
        password: str,
        role: str | Role,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> UserResult:
        """Create a user in actor's tenant.

        Requires the users_management plan feature and a free user slot.
        Only Owners may create another Owner.
        """
        new_role = parse_role(role)
        if new_role is None:
            raise ValidationException(f"Invalid role: {role}", field="role")
        if new_role is Role.OWNER and parse_role(actor.role) is not Role.OWNER:
            raise AuthorizationException(
                message="Only owners can promote users to the Owner role",
                required=[Role.OWNER.value],
                role=actor.role,
            )
        await self.limits_service.require_plan_feature(
            actor.tenant_id, PlanFeature.USERS_MANAGEMENT
        )
        await self.limits_service.validate_user_creation(actor.tenant_id)
        user = await self.user_repo.create_user(
            tenant_id=actor.tenant_id,
            email=email,
            password=password,
            role=new_role,
            first_name=first_name,
            last_name=last_name,
        )
        logger.info(
            "User added: tenant=%s user=%s role=%s by=%s",
            actor.tenant_id,
            user.id,
            new_role.value,
            actor.id,
        )
        return user

    async def add_shop(self, actor: UserResult, name: str):
        """Create a shop in actor's tenant when the shop limit allows it."""
        await self.limits_service.validate_shop_creation(actor.tenant_id)
        shop = await self.shop_repo.create_shop(actor.tenant_id, name)
        logger.info("Shop added: tenant=%s shop=%s by=%s", actor.tenant_id, shop.id, actor.id)
        return shop
