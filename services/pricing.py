from dataclasses import dataclass
from typing import Optional

from services.rental_days import WEEKEND_PACKAGE_MAX_DAYS

# Canonical one-way delivery fee (PLN); overridden by Config.DELIVERY_UNIT_FEE
DEFAULT_DELIVERY_UNIT_FEE = 25


@dataclass(frozen=True)
class Tariff:
    price_per_day: int
    price_next_day: int
    price_weekend: int
    transport_price: int = 0
    weekend_pickup_fee: int = 0


@dataclass(frozen=True)
class CostBreakdown:
    base_price: int
    delivery_fee: int
    weekend_pickup_fee_amount: int
    total: int

    def to_dict(self):
        return {
            "basePrice": self.base_price,
            "deliveryFee": self.delivery_fee,
            "weekendPickupFeeAmount": self.weekend_pickup_fee_amount,
            "total": self.total,
        }


def calculate_cost(
    tariff: Tariff,
    days: int,
    with_delivery: bool = False,
    is_weekend: bool = False,
    weekend_pickup: bool = False,
    delivery_unit_fee: int = DEFAULT_DELIVERY_UNIT_FEE,
) -> CostBreakdown:
    """
    Cost of renting one product for `days` rental days.

    The calendar flags are taken as given; derive them with
    services.rental_days.calendar_flags.
    """
    if days < 1:
        raise ValueError("days must be >= 1")

    if is_weekend and days <= WEEKEND_PACKAGE_MAX_DAYS:
        base_price = tariff.price_weekend
    elif days == 1:
        base_price = tariff.price_per_day
    else:
        base_price = tariff.price_per_day + tariff.price_next_day * (days - 1)

    # delivery is always billed as a round trip
    delivery_fee = delivery_unit_fee * 2 if with_delivery else 0
    weekend_pickup_fee_amount = tariff.weekend_pickup_fee if weekend_pickup else 0

    return CostBreakdown(
        base_price=base_price,
        delivery_fee=delivery_fee,
        weekend_pickup_fee_amount=weekend_pickup_fee_amount,
        total=base_price + delivery_fee + weekend_pickup_fee_amount,
    )


def calculate_rental_cost(
    product_id: str,
    days: int,
    with_delivery: bool = False,
    is_weekend: bool = False,
    weekend_pickup: bool = False,
    delivery_unit_fee: Optional[int] = None,
) -> Optional[CostBreakdown]:
    """Catalog lookup + calculate_cost. Unknown product -> None."""
    from flask import current_app
    from models import db
    from models.product import Product

    product = db.session.get(Product, product_id) if product_id else None
    if product is None:
        return None

    if delivery_unit_fee is None:
        delivery_unit_fee = current_app.config.get("DELIVERY_UNIT_FEE", DEFAULT_DELIVERY_UNIT_FEE)

    return calculate_cost(
        product.tariff,
        days,
        with_delivery=with_delivery,
        is_weekend=is_weekend,
        weekend_pickup=weekend_pickup,
        delivery_unit_fee=delivery_unit_fee,
    )
