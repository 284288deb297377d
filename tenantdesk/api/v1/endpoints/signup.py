"""Signup helpers: hold the company name between signup steps."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from tenantdesk.api.v1.dependencies import get_pending_signup_store
from tenantdesk.application.services import PendingSignupStore
from tenantdesk.core.limiter import limit_auth
from tenantdesk.schemas.auth import CompanyNameRequest, CompanyNameResponse

router = APIRouter()


@router.post("/company-name", response_model=CompanyNameResponse, status_code=201)
@limit_auth
async def store_company_name(
    request: Request,
    body: CompanyNameRequest,
    store: Annotated[PendingSignupStore, Depends(get_pending_signup_store)],
):
    """Store the company name for email until registration completes or the TTL expires."""
    await store.put(body.email, {"company_name": body.company_name})
    return CompanyNameResponse(expires_in=store.ttl_seconds)
