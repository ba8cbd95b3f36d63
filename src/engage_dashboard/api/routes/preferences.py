"""User preference endpoints."""

from fastapi import APIRouter, HTTPException, status

from engage_dashboard.api.deps import CurrentUserDep, JsonBody, StoreDep
from engage_dashboard.domain.preferences import UserPreferences

router = APIRouter(prefix="/user/preferences", tags=["Preferences"])


@router.get(
    "",
    response_model=UserPreferences,
    summary="Get preferences",
)
async def get_preferences(user: CurrentUserDep) -> UserPreferences:
    return user.preferences


@router.patch(
    "",
    response_model=UserPreferences,
    summary="Update preferences",
    description=(
        "Partial update. Each section in the body replaces the stored section; "
        "sections left out are kept. An invalid body changes nothing."
    ),
)
async def update_preferences(body: JsonBody, store: StoreDep, user: CurrentUserDep) -> UserPreferences:
    merged = store.update_preferences(user.id, body)
    if merged is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return merged
