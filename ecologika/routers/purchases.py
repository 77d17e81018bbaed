from fastapi import APIRouter, Depends
from typing import List

from ecologika.models.purchase import EmissionsReport, PurchaseHistoryEntry, SoldProductEntry
from ecologika.models.user import Profile
from ecologika.db.session import get_db
from ecologika.services.auth import get_current_user
from ecologika.services.i18n import Translator, get_translator
from ecologika.services.purchases import emissions_report, purchase_history, sold_products

router = APIRouter()

@router.get("/my-purchases", response_model=List[PurchaseHistoryEntry])
async def get_my_purchases(
    current_user: Profile = Depends(get_current_user),
    db=Depends(get_db)
):
    return await purchase_history(db, current_user.id)

@router.get("/sold-products", response_model=List[SoldProductEntry])
async def get_sold_products(
    current_user: Profile = Depends(get_current_user),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    return await sold_products(db, current_user.id, tr.t("common.not_informed"))

@router.get("/emissions-report", response_model=EmissionsReport)
async def get_emissions_report(
    current_user: Profile = Depends(get_current_user),
    db=Depends(get_db)
):
    return await emissions_report(db, current_user.id)
