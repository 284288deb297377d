"""Seed the subscription plan catalog (Free, Plus, Pro) and optionally subscribe a tenant.

Usage:
    python -m scripts.seed_subscription_plans [--create-tables] [--tenant ID --plan NAME]

--create-tables runs metadata.create_all (development databases only; there are
no migrations). Requires Postgres.
"""

import argparse
import asyncio
import sys

from sqlalchemy import select

from tenantdesk.application.services.limits_service import DEFAULT_PLANS
from tenantdesk.core.config import get_settings
from tenantdesk.domain.enums import SubscriptionStatus
from tenantdesk.infrastructure.persistence import database
from tenantdesk.infrastructure.persistence.models import Subscription, SubscriptionPlan
from tenantdesk.infrastructure.persistence.repositories import LimitsRepository


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--create-tables", action="store_true")
    parser.add_argument("--tenant", help="Tenant id to subscribe")
    parser.add_argument(
        "--plan", choices=[p.name for p in DEFAULT_PLANS], help="Plan for --tenant"
    )
    args = parser.parse_args()
    if bool(args.tenant) != bool(args.plan):
        parser.error("--tenant and --plan must be given together")
    return args


async def main() -> None:
    """Upsert DEFAULT_PLANS; subscribe --tenant to --plan when given."""
    args = _parse_args()
    get_settings()
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        print("AsyncSessionLocal not configured", file=sys.stderr)
        sys.exit(1)

    if args.create_tables:
        async with database.engine.begin() as conn:
            await conn.run_sync(database.Base.metadata.create_all)
        print("Tables created")

    async with database.AsyncSessionLocal() as session:
        async with session.begin():
            repo = LimitsRepository(session)
            for plan in DEFAULT_PLANS:
                created = await repo.upsert_plan(plan)
                print(f"{'Created' if created else 'Updated'} plan {plan.name}")
            if args.tenant:
                plan_id = await session.scalar(
                    select(SubscriptionPlan.id).where(SubscriptionPlan.name == args.plan)
                )
                session.add(
                    Subscription(
                        tenant_id=args.tenant,
                        plan_id=plan_id,
                        status=SubscriptionStatus.ACTIVE.value,
                    )
                )
                print(f"Subscribed tenant {args.tenant} to {args.plan}")

    await database.engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
