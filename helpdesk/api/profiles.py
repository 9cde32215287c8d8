from __future__ import annotations

from fastapi import APIRouter, Depends

from helpdesk.api.deps import get_profile_store, require_role
from helpdesk.services.profiles import ProfileStore

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("", response_model=dict)
async def list_profiles(
    profiles: ProfileStore = Depends(get_profile_store),
    admin=Depends(require_role("admin")),
) -> dict:
    return {"profiles": await profiles.list_staff()}
