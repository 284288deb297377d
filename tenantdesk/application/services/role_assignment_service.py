"""Changing a tenant user's role under the ownership rules."""

from __future__ import annotations

import logging

from tenantdesk.application.dtos.user import UserResult
from tenantdesk.application.interfaces.repositories import IUserRepository
from tenantdesk.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    RoleChangeException,
    ValidationException,
)
from tenantdesk.domain.roles import Role, parse_role

logger = logging.getLogger(__name__)


class RoleAssignmentService:
    """Applies role changes requested by an Owner or Administrator.

    Rules, checked in order:
    - the new role must be one of the four roles;
    - the target must exist in the actor's tenant;
    - nobody changes their own role;
    - only Owners modify an Owner account, and only Owners grant Owner;
    - the tenant's last Owner cannot be demoted.
    """

    def __init__(self, user_repo: IUserRepository) -> None:
        self.user_repo = user_repo

    async def change_user_role(
        self, actor: UserResult, target_user_id: str, new_role: str | Role
    ) -> UserResult:
        role = parse_role(new_role)
        if role is None:
            raise ValidationException(f"Invalid role: {new_role}", field="role")

        target = await self.user_repo.get_by_id_and_tenant(target_user_id, actor.tenant_id)
        if target is None:
            raise ResourceNotFoundException("user", target_user_id)

        if target.id == actor.id:
            raise RoleChangeException("Cannot change your own role", user_id=target.id)

        actor_is_owner = parse_role(actor.role) is Role.OWNER
        target_is_owner = parse_role(target.role) is Role.OWNER

        if target_is_owner and not actor_is_owner:
            raise AuthorizationException(
                message="Only owners can modify other owner accounts",
                required=[Role.OWNER.value],
                role=actor.role,
            )
        if role is Role.OWNER and not actor_is_owner:
            raise AuthorizationException(
                message="Only owners can promote users to the Owner role",
                required=[Role.OWNER.value],
                role=actor.role,
            )
        if target_is_owner and role is not Role.OWNER:
            owners = await self.user_repo.count_owners(actor.tenant_id)
            if owners <= 1:
                raise RoleChangeException(
                    "Cannot demote the only owner. Assign another owner first.", user_id=target.id
                )

        if parse_role(target.role) is role:
            return target

        updated = await self.user_repo.set_role(target.id, actor.tenant_id, role.value)
        logger.info(
            "User role changed: tenant=%s user=%s %s -> %s by=%s",
            actor.tenant_id,
            target.id,
            target.role,
            role.value,
            actor.id,
        )
        return updated
