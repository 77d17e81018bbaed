from datetime import datetime

from ecologika.models.product import Product
from ecologika.models.purchase import Purchase, ShippingDetails
from ecologika.services.purchases import build_emissions_report, sold_products

from conftest import make_profile


def purchase(product_id, co2, when, buyer_id="b1"):
    return Purchase(
        product_id=product_id,
        buyer_id=buyer_id,
        seller_id="s1",
        quantity=1,
        unit_price=10.0,
        shipping_fee=15.0,
        total_price=25.0,
        co2_saved=co2,
        shipping=ShippingDetails(address="Rua", city="Porto", phone="1"),
        purchase_date=when,
    )


def test_emissions_report_aggregates_by_month_and_category():
    products = {
        "p1": Product(id="p1", name="Papel", category="Materiais", price=10, seller_id="s1"),
        "p2": Product(id="p2", name="Cobre", category="Componentes", price=10, seller_id="s1"),
    }
    now = datetime(2024, 6, 15)
    purchases = [
        purchase("p1", 22.0, datetime(2024, 6, 1)),
        purchase("p2", 44.0, datetime(2024, 5, 3)),
        purchase("p2", None, datetime(2024, 5, 20)),
        purchase("p1", 66.0, datetime(2023, 1, 1)),
    ]

    report = build_emissions_report(purchases, products, now)

    assert report.total_co2_saved == 132.0
    assert report.total_purchases == 4
    assert report.trees_equivalent == 6
    assert [m.month for m in report.monthly] == ["2024-01", "2024-02", "2024-03", "2024-04", "2024-05", "2024-06"]
    assert report.monthly[-2].purchases == 2
    assert report.monthly[-2].co2_saved == 44.0
    assert report.monthly_average == 11.0
    assert report.by_category == {"Materiais": 88.0, "Componentes": 44.0}


def test_emissions_report_month_window_crosses_year():
    report = build_emissions_report([], {}, datetime(2024, 2, 10))
    assert [m.month for m in report.monthly][0] == "2023-09"
    assert report.total_co2_saved == 0


async def test_sold_products_fall_back_when_buyer_is_missing(db):
    buyer = await make_profile(db, name="Maria Santos", company="")
    await db.products.insert_one(Product(id="p1", name="Vidro", price=10, seller_id="s1").model_dump())
    await db.purchases.insert_one(purchase("p1", 1.0, datetime(2024, 1, 1), buyer_id=buyer.id).model_dump())
    await db.purchases.insert_one(purchase("p1", None, datetime(2024, 2, 1), buyer_id="ghost").model_dump())

    entries = await sold_products(db, "s1", "Não informado")

    assert [e.buyer_name for e in entries] == ["Não informado", "Maria Santos"]
    assert entries[1].buyer_company == "Não informado"
    assert entries[0].co2_saved == 0.0
    assert all(e.product_name == "Vidro" for e in entries)
