"""
Accounts API routes.
"""
import uuid
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.database import get_session
from relateai.core.validation import validate
from relateai.services.account_service import AccountService
from relateai.schemas.account import AccountCreate, AccountUpdate, AccountQuery, AccountRead
from relateai.api.deps import get_current_user
from relateai.models.user import User

router = APIRouter(prefix="/api/accounts", tags=["accounts"])


@router.get("")
async def list_accounts(
    query: AccountQuery = Depends(validate(AccountQuery, "query")),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """List accounts with filtering, sorting and pagination."""
    accounts, pagination = await AccountService(session).list(current_user.id, query)
    return {
        "success": True,
        "accounts": [AccountRead.model_validate(a) for a in accounts],
        "pagination": pagination
    }


@router.post("", status_code=201)
async def create_account(
    data: AccountCreate = Depends(validate(AccountCreate)),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    account = await AccountService(session).create(current_user.id, data)
    return {"success": True, "message": "Account created successfully", "account": AccountRead.model_validate(account)}


@router.get("/{account_id}")
async def get_account(
    account_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    account = await AccountService(session).get(current_user.id, account_id)
    return {"success": True, "account": AccountRead.model_validate(account)}


@router.put("/{account_id}")
async def update_account(
    account_id: uuid.UUID,
    data: AccountUpdate = Depends(validate(AccountUpdate)),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    account = await AccountService(session).update(current_user.id, account_id, data)
    return {"success": True, "message": "Account updated successfully", "account": AccountRead.model_validate(account)}


@router.delete("/{account_id}")
async def delete_account(
    account_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Delete an account together with its contacts, messages and assessment."""
    await AccountService(session).delete(current_user.id, account_id)
    return {"success": True, "message": "Account deleted successfully"}
