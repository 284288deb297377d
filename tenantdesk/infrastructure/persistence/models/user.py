"""User ORM model (tenant-scoped). Carries the user's role in the hierarchy."""

from sqlalchemy import Boolean, CheckConstraint, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from tenantdesk.domain.roles import Role
from tenantdesk.infrastructure.persistence.database import Base
from tenantdesk.infrastructure.persistence.models.mixins import MultiTenantModel


class User(MultiTenantModel, Base):
    """User model. Table: app_user. Email is unique across tenants (login is by email)."""

    __tablename__ = "app_user"

    email: Mapped[str] = mapped_column(String, nullable=False)
    first_name: Mapped[str | None] = mapped_column(String, nullable=True)
    last_name: Mapped[str | None] = mapped_column(String, nullable=True)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[str] = mapped_column(
        String, nullable=False, default=Role.EMPLOYEE.value, index=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_app_user_email"),
        CheckConstraint(
            "role IN ({})".format(", ".join(f"'{v}'" for v in Role.values())),
            name="app_user_role_check",
        ),
    )
