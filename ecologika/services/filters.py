from typing import Iterable, List, Optional

from ecologika.models.catalog import DEFAULT_PRICE_RANGE, FilterOptions, ProductFilters
from ecologika.models.product import Product
from ecologika.services.catalog import VISIBLE_QUERY


def has_active_filters(filters: ProductFilters, search_term: Optional[str] = "") -> bool:
    """Whether the user moved away from the defaults.

    The default price range is a UI bound, so it must not hide listings
    priced above it until the user narrows it.
    """
    low, high = filters.price_range
    default_low, default_high = DEFAULT_PRICE_RANGE
    return bool(
        (search_term or "").strip()
        or filters.material
        or filters.location
        or filters.country
        or low > default_low
        or high < default_high
    )


def matches(product: Product, search_term: Optional[str], filters: ProductFilters) -> bool:
    term = (search_term or "").strip().lower()
    if term:
        haystacks = (product.name, product.material, product.description)
        if not any(term in (text or "").lower() for text in haystacks):
            return False

    if filters.material and product.material != filters.material:
        return False
    if filters.location and filters.location not in (product.location or ""):
        return False
    if filters.country and product.country != filters.country:
        return False

    low, high = filters.price_range
    return low <= product.price <= high


def filter_listings(listings: Iterable[Product], search_term: Optional[str], filters: ProductFilters) -> List[Product]:
    listings = list(listings)
    if not has_active_filters(filters, search_term):
        return listings
    return [listing for listing in listings if matches(listing, search_term, filters)]


def _distinct(values: Iterable[Optional[str]]) -> List[str]:
    return sorted({value for value in values if value})


async def load_filter_options(db) -> FilterOptions:
    docs = await db.products.find(
        VISIBLE_QUERY,
        {"material": 1, "location": 1, "country": 1}
    ).to_list(10000)
    return FilterOptions(
        materials=_distinct(doc.get("material") for doc in docs),
        locations=_distinct(doc.get("location") for doc in docs),
        countries=_distinct(doc.get("country") for doc in docs),
    )
