from fastapi import APIRouter, Depends, HTTPException, Request
from datetime import datetime
from pymongo.errors import PyMongoError
import logging

from ecologika.models.user import PasswordChangeRequest, Profile, ProfileUpdate, SessionInfo
from ecologika.db.session import get_db
from ecologika.routers.auth import MIN_PASSWORD_LENGTH
from ecologika.services.auth import get_current_user, hash_password, verify_password
from ecologika.services.i18n import Translator, get_translator
from ecologika.services.log import log_activity
from ecologika.services.session import SessionStore, get_session

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("/auth/me", response_model=SessionInfo)
async def get_me(session: SessionStore = Depends(get_session)):
    return session.info()

@router.put("/profile", response_model=Profile)
async def update_profile(
    request: Request,
    profile_data: ProfileUpdate,
    session: SessionStore = Depends(get_session),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    current_user = session.profile
    update_data = {k: v for k, v in profile_data.model_dump().items() if v is not None}
    if not update_data:
        return current_user

    merged = current_user.model_copy(update=update_data)
    update_data["name"] = f"{merged.first_name or ''} {merged.last_name or ''}".strip() or current_user.name
    update_data["location"] = ", ".join(part for part in (merged.address, merged.city, merged.country) if part)
    update_data["updated_at"] = datetime.utcnow()

    try:
        await db.profiles.update_one({"id": current_user.id}, {"$set": update_data})
    except PyMongoError as e:
        logger.error(f"Failed to update profile {current_user.id}: {e}")
        raise HTTPException(status_code=503, detail=tr.t("common.generic_error"))

    updated_fields = [k for k in profile_data.model_dump(exclude_none=True)]
    await log_activity(
        db,
        user_id=current_user.id,
        actor_name=current_user.name,
        action="profile_updated",
        details=f"Updated profile fields: {', '.join(updated_fields)}",
        target_type="profile",
        request=request
    )

    # Re-fetch so the response reflects what was stored
    return await session.refresh()

@router.put("/settings/password")
async def change_password(
    request: Request,
    password_data: PasswordChangeRequest,
    current_user: Profile = Depends(get_current_user),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    user_doc = await db.profiles.find_one({"id": current_user.id})
    if not verify_password(password_data.current_password, user_doc["hashed_password"]):
        raise HTTPException(status_code=400, detail=tr.t("auth.current_password_incorrect"))

    if password_data.new_password != password_data.confirm_password:
        raise HTTPException(status_code=400, detail=tr.t("auth.password_mismatch"))

    if len(password_data.new_password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=400, detail=tr.t("auth.password_too_short"))

    await db.profiles.update_one(
        {"id": current_user.id},
        {"$set": {"hashed_password": hash_password(password_data.new_password), "updated_at": datetime.utcnow()}}
    )

    await log_activity(
        db,
        user_id=current_user.id,
        actor_name=current_user.name,
        action="password_changed",
        details="User changed their password",
        target_type="profile",
        request=request
    )

    return {"message": tr.t("auth.password_updated")}
