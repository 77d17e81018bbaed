from fastapi import APIRouter, Depends, HTTPException, Request
from datetime import datetime, timedelta
import logging
import secrets

from ecologika.models.user import (
    PasswordResetConfirm,
    PasswordResetRequest,
    Profile,
    Token,
    UserCreate,
    UserLogin,
)
from ecologika.db.session import get_db
from ecologika.services.auth import (
    get_token_payload,
    hash_password,
    issue_token,
    revoke_token,
    verify_password,
)
from ecologika.services.i18n import Translator, get_translator
from ecologika.services.interests import validate_nif_cnpj
from ecologika.services.log import log_activity

logger = logging.getLogger(__name__)
router = APIRouter()

MIN_PASSWORD_LENGTH = 6
RESET_TOKEN_TTL = timedelta(hours=1)

def registration_error(user_data: UserCreate):
    """Return the message key of the first problem with a registration, if any."""
    if user_data.email != user_data.confirm_email:
        return "auth.email_mismatch"
    if user_data.password != user_data.confirm_password:
        return "auth.password_mismatch"
    if len(user_data.password) < MIN_PASSWORD_LENGTH:
        return "auth.password_too_short"
    if not user_data.accept_terms:
        return "auth.terms_required"
    if user_data.nif_cnpj and not validate_nif_cnpj(user_data.nif_cnpj):
        return "auth.invalid_nif"
    return None

@router.post("/auth/register", response_model=Token)
async def register(
    request: Request,
    user_data: UserCreate,
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    error = registration_error(user_data)
    if error:
        raise HTTPException(status_code=400, detail=tr.t(error))

    email = user_data.email.strip().lower()
    existing_user = await db.profiles.find_one({"email": email})
    if existing_user:
        raise HTTPException(status_code=400, detail=tr.t("auth.already_registered"))

    location = ", ".join(part for part in (user_data.address, user_data.city, user_data.country) if part)
    profile = Profile(
        email=email,
        name=f"{user_data.first_name} {user_data.last_name}".strip(),
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        company=user_data.company,
        company_role=user_data.company_role,
        company_website=user_data.company_website,
        nif_cnpj=user_data.nif_cnpj,
        phone=user_data.phone,
        address=user_data.address,
        city=user_data.city,
        country=user_data.country,
        location=location,
        user_type=user_data.user_type,
        interesses_ids=list(dict.fromkeys(user_data.interesses_ids)),
        onde_ouviu=user_data.onde_ouviu,
        # Sellers wait for an admin; buyers can browse right away
        approval_status="pending" if user_data.user_type == "seller" else "approved",
    )

    profile_doc = profile.model_dump()
    profile_doc["hashed_password"] = hash_password(user_data.password)
    await db.profiles.insert_one(profile_doc)

    await log_activity(
        db,
        user_id=profile.id,
        actor_name=profile.name,
        action="profile_registered",
        details=f"Registered as {profile.user_type}",
        target_id=profile.id,
        target_type="profile",
        request=request
    )

    return issue_token(profile.id)


@router.post("/auth/login", response_model=Token)
async def login(
    user_data: UserLogin,
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    user = await db.profiles.find_one({"email": user_data.email.strip().lower()})
    if not user or not verify_password(user_data.password, user["hashed_password"]):
        raise HTTPException(status_code=400, detail=tr.t("auth.invalid_credentials"))

    return issue_token(user["id"])


@router.post("/auth/logout")
async def logout(
    payload: dict = Depends(get_token_payload),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    await revoke_token(db, payload)
    return {"message": tr.t("auth.logged_out")}


@router.post("/auth/password-reset")
async def request_password_reset(
    reset_data: PasswordResetRequest,
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    user = await db.profiles.find_one({"email": reset_data.email.strip().lower()})
    if user:
        token = secrets.token_urlsafe(32)
        await db.password_resets.insert_one({
            "token": token,
            "user_id": user["id"],
            "expires_at": datetime.utcnow() + RESET_TOKEN_TTL,
            "used": False,
        })
        # Delivery is handled by the mail relay watching this collection
        logger.info(f"Password reset requested for user {user['id']}")

    # Same answer whether or not the email exists
    return {"message": tr.t("auth.reset_sent")}


@router.post("/auth/password-reset/confirm")
async def confirm_password_reset(
    reset_data: PasswordResetConfirm,
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    reset = await db.password_resets.find_one({"token": reset_data.token, "used": False})
    if not reset or reset["expires_at"] < datetime.utcnow():
        raise HTTPException(status_code=400, detail=tr.t("auth.reset_invalid"))

    if len(reset_data.new_password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=400, detail=tr.t("auth.password_too_short"))

    await db.profiles.update_one(
        {"id": reset["user_id"]},
        {"$set": {"hashed_password": hash_password(reset_data.new_password), "updated_at": datetime.utcnow()}}
    )
    await db.password_resets.update_one({"token": reset_data.token}, {"$set": {"used": True}})

    return {"message": tr.t("auth.password_updated")}
