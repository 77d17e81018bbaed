from pydantic import BaseModel, ConfigDict, model_validator
from typing import List, Tuple

from ecologika.models.product import Listing

DEFAULT_PRICE_RANGE: Tuple[float, float] = (0.0, 1000.0)

class ProductFilters(BaseModel):
    """Structured catalog filters.

    Empty strings mean "no restriction". ``price_range`` is an inclusive
    ``(min, max)`` interval in the product currency.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    material: str = ""
    location: str = ""
    country: str = ""
    price_range: Tuple[float, float] = DEFAULT_PRICE_RANGE

    @model_validator(mode="after")
    def check_price_range(self):
        low, high = self.price_range
        if low < 0:
            raise ValueError("price_range minimum must be >= 0")
        if low > high:
            raise ValueError("price_range minimum must not exceed maximum")
        return self

class FilterOptions(BaseModel):
    materials: List[str]
    locations: List[str]
    countries: List[str]

class CatalogPage(BaseModel):
    products: List[Listing]
    total: int
    filters_active: bool
