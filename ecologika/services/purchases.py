from collections import OrderedDict, defaultdict
from datetime import datetime
from typing import Dict, List, Optional

from ecologika.models.product import Product
from ecologika.models.purchase import (
    EmissionsReport,
    MonthlyEmissions,
    Purchase,
    PurchaseHistoryEntry,
    SoldProductEntry,
)

# Average kg of CO2 absorbed by one tree per year
CO2_PER_TREE = 22
REPORT_MONTHS = 6


async def _products_by_id(db, product_ids: List[str]) -> Dict[str, Product]:
    if not product_ids:
        return {}
    docs = await db.products.find({"id": {"$in": list(set(product_ids))}}).to_list(1000)
    return {doc["id"]: Product(**doc) for doc in docs}


async def purchase_history(db, buyer_id: str) -> List[PurchaseHistoryEntry]:
    docs = await db.purchases.find({"buyer_id": buyer_id}).sort("purchase_date", -1).to_list(1000)
    purchases = [Purchase(**doc) for doc in docs]
    products = await _products_by_id(db, [p.product_id for p in purchases])

    result = []
    for purchase in purchases:
        product = products.get(purchase.product_id)
        result.append(PurchaseHistoryEntry(
            purchase=purchase,
            product_name=product.name if product else "",
            product_category=product.category if product else "",
        ))
    return result


async def sold_products(db, seller_id: str, not_informed: str) -> List[SoldProductEntry]:
    docs = await db.purchases.find({"seller_id": seller_id}).sort("purchase_date", -1).to_list(1000)
    if not docs:
        return []

    purchases = [Purchase(**doc) for doc in docs]
    products = await _products_by_id(db, [p.product_id for p in purchases])

    buyer_ids = list({p.buyer_id for p in purchases})
    buyers = {
        doc["id"]: doc
        for doc in await db.profiles.find({"id": {"$in": buyer_ids}}).to_list(len(buyer_ids))
    }

    result = []
    for purchase in purchases:
        product = products.get(purchase.product_id)
        buyer = buyers.get(purchase.buyer_id, {})
        result.append(SoldProductEntry(
            id=purchase.id,
            product_name=product.name if product else not_informed,
            quantity=purchase.quantity,
            total_price=purchase.total_price,
            purchase_date=purchase.purchase_date,
            status=purchase.status,
            co2_saved=purchase.co2_saved or 0.0,
            buyer_name=buyer.get("name") or not_informed,
            buyer_email=buyer.get("email") or not_informed,
            buyer_company=buyer.get("company") or not_informed,
            buyer_location=buyer.get("location") or not_informed,
        ))
    return result


def _last_months(now: datetime, count: int) -> List[str]:
    months = []
    year, month = now.year, now.month
    for _ in range(count):
        months.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))


def build_emissions_report(
    purchases: List[Purchase],
    products: Dict[str, Product],
    now: Optional[datetime] = None
) -> EmissionsReport:
    now = now or datetime.utcnow()
    monthly = OrderedDict((key, [0.0, 0]) for key in _last_months(now, REPORT_MONTHS))
    by_category: Dict[str, float] = defaultdict(float)

    total = 0.0
    for purchase in purchases:
        saved = purchase.co2_saved or 0.0
        total += saved

        key = purchase.purchase_date.strftime("%Y-%m")
        if key in monthly:
            monthly[key][0] += saved
            monthly[key][1] += 1

        product = products.get(purchase.product_id)
        category = (product.category if product else "") or "Outros"
        by_category[category] += saved

    return EmissionsReport(
        total_co2_saved=round(total, 2),
        total_purchases=len(purchases),
        trees_equivalent=round(total / CO2_PER_TREE),
        monthly_average=round(sum(v[0] for v in monthly.values()) / REPORT_MONTHS, 2),
        monthly=[
            MonthlyEmissions(month=key, co2_saved=round(value[0], 2), purchases=value[1])
            for key, value in monthly.items()
        ],
        by_category={k: round(v, 2) for k, v in by_category.items()},
    )


async def emissions_report(db, buyer_id: str) -> EmissionsReport:
    docs = await db.purchases.find({"buyer_id": buyer_id}).to_list(10000)
    purchases = [Purchase(**doc) for doc in docs]
    products = await _products_by_id(db, [p.product_id for p in purchases])
    return build_emissions_report(purchases, products)
