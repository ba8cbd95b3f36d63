"""FastAPI dependencies."""

from typing import Annotated, Any

from fastapi import Body, Depends, HTTPException, Request, status

from engage_dashboard.adapters.ai import AIProvider, get_ai_provider
from engage_dashboard.domain.schemas import User
from engage_dashboard.services.storage import DEMO_USERNAME, MemoryStore


def get_store(request: Request) -> MemoryStore:
    """Get the application's in-memory store."""
    return request.app.state.store


StoreDep = Annotated[MemoryStore, Depends(get_store)]


def get_current_user(store: StoreDep) -> User:
    """The single user the reference API serves: the demo user, else the first one."""
    user = store.get_user_by_username(DEMO_USERNAME)
    if user is None and store.users:
        user = store.users[min(store.users)]
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No user available",
        )
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]


def get_ai_provider_dep() -> AIProvider:
    """Get the configured AI provider."""
    return get_ai_provider()


AIProviderDep = Annotated[AIProvider, Depends(get_ai_provider_dep)]

# Raw JSON object bodies, validated by the domain schemas so rejections carry
# dotted camelCase paths
JsonBody = Annotated[dict[str, Any], Body()]
