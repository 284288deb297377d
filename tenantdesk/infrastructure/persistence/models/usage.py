"""Tenant resources counted against plan limits (shops, sent emails)."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from tenantdesk.infrastructure.persistence.database import Base
from tenantdesk.infrastructure.persistence.models.mixins import MultiTenantModel


class Shop(MultiTenantModel, Base):
    """Shop location. Only active shops count toward max_shops."""

    __tablename__ = "shop"

    name: Mapped[str] = mapped_column(String, nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )


class EmailSend(MultiTenantModel, Base):
    """One outgoing email. Rows since the start of the UTC month count toward the quota."""

    __tablename__ = "email_send"

    recipient: Mapped[str] = mapped_column(String, nullable=False)
    email_type: Mapped[str] = mapped_column(String, nullable=False)
    sent_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (Index("ix_email_send_tenant_sent_at", "tenant_id", "sent_at"),)
