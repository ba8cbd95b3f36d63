"""Linked social account endpoints."""

from fastapi import APIRouter, HTTPException, status

from engage_dashboard.api.deps import CurrentUserDep, JsonBody, StoreDep
from engage_dashboard.domain.schemas import (
    InsertSocialAccount,
    SocialAccount,
    User,
    validate_payload,
)
from engage_dashboard.logging import get_logger
from engage_dashboard.services.storage import MemoryStore

router = APIRouter(prefix="/social-accounts", tags=["Social Accounts"])
logger = get_logger(__name__)

# Identity and ownership never change after linking
_IMMUTABLE_FIELDS = {"id", "userId", "platform"}


def _require_owned(store: MemoryStore, user: User, account_id: int) -> SocialAccount:
    account = store.get_social_account(account_id)
    if account is None or account.user_id != user.id or not account.is_active:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Account not found or access denied",
        )
    return account


@router.get(
    "",
    response_model=list[SocialAccount],
    summary="List accounts",
    description="List the user's active social accounts.",
)
async def list_social_accounts(store: StoreDep, user: CurrentUserDep) -> list[SocialAccount]:
    return store.get_social_accounts(user.id)


@router.post(
    "",
    response_model=SocialAccount,
    status_code=status.HTTP_201_CREATED,
    summary="Link account",
)
async def create_social_account(
    body: JsonBody, store: StoreDep, user: CurrentUserDep
) -> SocialAccount:
    account = validate_payload(InsertSocialAccount, {**body, "userId": user.id})
    created = store.create_social_account(account)
    logger.info("social_account_linked", account_id=created.id, platform=str(created.platform))
    return created


@router.put(
    "/{account_id}",
    response_model=SocialAccount,
    summary="Update account",
)
async def update_social_account(
    account_id: int, body: JsonBody, store: StoreDep, user: CurrentUserDep
) -> SocialAccount:
    account = _require_owned(store, user, account_id)
    changes = {
        k: v for k, v in SocialAccount.wire_keys(body).items() if k not in _IMMUTABLE_FIELDS
    }
    merged = validate_payload(SocialAccount, {**account.to_wire(), **changes})
    updated = store.update_social_account(account_id, merged.model_dump())
    if updated is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Account not found or access denied",
        )
    logger.info("social_account_updated", account_id=account_id, fields=sorted(changes))
    return updated


@router.delete(
    "/{account_id}",
    summary="Unlink account",
    description="Deactivate an account. Accounts are never hard-deleted.",
)
async def delete_social_account(
    account_id: int, store: StoreDep, user: CurrentUserDep
) -> dict[str, str]:
    _require_owned(store, user, account_id)
    store.deactivate_social_account(account_id)
    logger.info("social_account_deactivated", account_id=account_id)
    return {"message": "Account deleted successfully"}
