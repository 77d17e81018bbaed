from fastapi import APIRouter, Depends, HTTPException, Request
from typing import List, Optional
from pymongo.errors import PyMongoError
import logging

from ecologika.models.log import ActivityLog
from ecologika.models.product import ApprovalDecision, Product
from ecologika.models.user import Profile
from ecologika.db.session import get_db
from ecologika.services import approval
from ecologika.services.auth import get_admin_user
from ecologika.services.i18n import Translator, get_translator
from ecologika.services.log import log_activity
from ecologika.services.notification import notify_quietly

logger = logging.getLogger(__name__)
router = APIRouter()

async def apply_decision(action, db, entity_id: str, admin_user: Profile, tr: Translator, *args):
    try:
        return await action(db, entity_id, admin_user, *args)
    except approval.NotPending:
        raise HTTPException(status_code=409, detail=tr.t("admin.not_pending"))
    except PyMongoError as e:
        logger.error(f"Approval action {action.__name__} on {entity_id} failed: {e}")
        raise HTTPException(status_code=503, detail=tr.t("admin.update_error"))

@router.get("/admin/pending/profiles", response_model=List[Profile])
async def get_pending_profiles(admin_user: Profile = Depends(get_admin_user), db=Depends(get_db)):
    return await approval.list_pending_profiles(db)

@router.get("/admin/pending/products", response_model=List[Product])
async def get_pending_products(admin_user: Profile = Depends(get_admin_user), db=Depends(get_db)):
    return await approval.list_pending_products(db)

@router.post("/admin/profiles/{profile_id}/approve", response_model=Profile)
async def approve_profile(
    request: Request,
    profile_id: str,
    admin_user: Profile = Depends(get_admin_user),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    profile = await apply_decision(approval.approve_profile, db, profile_id, admin_user, tr)

    await log_activity(
        db,
        user_id=admin_user.id,
        actor_name=admin_user.name,
        action="profile_approved",
        details=f"Approved profile {profile.email}",
        target_id=profile_id,
        target_type="profile",
        request=request
    )
    await notify_quietly(
        db,
        user_id=profile_id,
        title=tr.t("common.success"),
        message=tr.t("admin.user_approved"),
        notification_type="success",
        action_url="/products"
    )
    return profile

@router.post("/admin/profiles/{profile_id}/reject", response_model=Profile)
async def reject_profile(
    request: Request,
    profile_id: str,
    decision: Optional[ApprovalDecision] = None,
    admin_user: Profile = Depends(get_admin_user),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    reason = (decision.reason if decision else None) or tr.t("admin.default_user_reason")
    profile = await apply_decision(approval.reject_profile, db, profile_id, admin_user, tr, reason)

    await log_activity(
        db,
        user_id=admin_user.id,
        actor_name=admin_user.name,
        action="profile_rejected",
        details=f"Rejected profile {profile.email}: {reason}",
        target_id=profile_id,
        target_type="profile",
        request=request
    )
    await notify_quietly(
        db,
        user_id=profile_id,
        title=tr.t("common.error"),
        message=f"{tr.t('admin.user_rejected')} {reason}",
        notification_type="error"
    )
    return profile

@router.post("/admin/products/{product_id}/approve", response_model=Product)
async def approve_product(
    request: Request,
    product_id: str,
    admin_user: Profile = Depends(get_admin_user),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    product = await apply_decision(approval.approve_product, db, product_id, admin_user, tr)

    await log_activity(
        db,
        user_id=admin_user.id,
        actor_name=admin_user.name,
        action="product_approved",
        details=f"Approved product '{product.name}'",
        target_id=product_id,
        target_type="product",
        request=request
    )
    await notify_quietly(
        db,
        user_id=product.seller_id,
        title=tr.t("common.success"),
        message=f"{tr.t('admin.product_approved')} ({product.name})",
        notification_type="success",
        action_url=f"/products/{product_id}",
        metadata={"product_id": product_id}
    )
    return product

@router.post("/admin/products/{product_id}/reject", response_model=Product)
async def reject_product(
    request: Request,
    product_id: str,
    decision: Optional[ApprovalDecision] = None,
    admin_user: Profile = Depends(get_admin_user),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    reason = (decision.reason if decision else None) or tr.t("admin.default_product_reason")
    product = await apply_decision(approval.reject_product, db, product_id, admin_user, tr, reason)

    await log_activity(
        db,
        user_id=admin_user.id,
        actor_name=admin_user.name,
        action="product_rejected",
        details=f"Rejected product '{product.name}': {reason}",
        target_id=product_id,
        target_type="product",
        request=request
    )
    await notify_quietly(
        db,
        user_id=product.seller_id,
        title=tr.t("common.error"),
        message=f"{tr.t('admin.product_rejected')} ({product.name}) {reason}",
        notification_type="error",
        metadata={"product_id": product_id}
    )
    return product

@router.get("/admin/logs", response_model=List[ActivityLog])
async def get_activity_logs(
    action: Optional[str] = None,
    user_id: Optional[str] = None,
    target_type: Optional[str] = None,
    limit: int = 100,
    skip: int = 0,
    admin_user: Profile = Depends(get_admin_user),
    db=Depends(get_db)
):
    """Get activity logs with optional filtering"""
    query = {}
    if action:
        query["action"] = action
    if user_id:
        query["user_id"] = user_id
    if target_type:
        query["target_type"] = target_type

    logs = await db.activity_logs.find(query).sort("created_at", -1).skip(skip).limit(limit).to_list(limit)
    return [ActivityLog(**log) for log in logs]
