import pytest

from services.pricing import Tariff, calculate_cost, calculate_rental_cost

NT_22 = Tariff(price_per_day=45, price_next_day=45, price_weekend=150, transport_price=25, weekend_pickup_fee=30)


def test_standard_multi_day_rental():
    cost = calculate_cost(NT_22, 5)
    assert cost.base_price == 225
    assert cost.delivery_fee == 0
    assert cost.weekend_pickup_fee_amount == 0
    assert cost.total == 225


def test_single_day_uses_first_day_price():
    tariff = Tariff(60, 50, 150)
    assert calculate_cost(tariff, 1).base_price == 60
    assert calculate_cost(tariff, 2).base_price == 110


def test_weekend_package_is_flat():
    assert calculate_cost(NT_22, 3, is_weekend=True).base_price == 150
    assert calculate_cost(NT_22, 2, is_weekend=True).base_price == 150
    assert calculate_cost(NT_22, 1, is_weekend=True).base_price == 150


def test_weekend_flag_ignored_past_three_days():
    assert calculate_cost(NT_22, 4, is_weekend=True).base_price == 180


def test_weekend_package_can_undercut_standard_rate():
    tariff = Tariff(60, 50, 150)
    assert calculate_cost(tariff, 3, is_weekend=True).total < calculate_cost(tariff, 3).total


def test_delivery_is_billed_as_round_trip():
    cost = calculate_cost(NT_22, 2, with_delivery=True)
    assert cost.delivery_fee == 50
    assert cost.total == 140
    assert calculate_cost(NT_22, 2, with_delivery=True, delivery_unit_fee=30).delivery_fee == 60


def test_weekend_pickup_surcharge():
    cost = calculate_cost(NT_22, 2, weekend_pickup=True)
    assert cost.weekend_pickup_fee_amount == 30
    assert cost.total == 120


def test_total_is_sum_of_components():
    for days in range(1, 15):
        for flags in [(False, False, False), (True, False, True), (False, True, True), (True, True, False)]:
            delivery, weekend, pickup = flags
            c = calculate_cost(NT_22, days, with_delivery=delivery, is_weekend=weekend, weekend_pickup=pickup)
            assert c.total == c.base_price + c.delivery_fee + c.weekend_pickup_fee_amount
            assert c.base_price >= 0 and c.delivery_fee >= 0 and c.weekend_pickup_fee_amount >= 0


def test_cost_never_drops_with_more_days():
    tariff = Tariff(60, 50, 150, weekend_pickup_fee=30)
    for delivery in (False, True):
        totals = [calculate_cost(tariff, d, with_delivery=delivery).total for d in range(1, 31)]
        assert totals == sorted(totals)


def test_zero_days_rejected():
    with pytest.raises(ValueError):
        calculate_cost(NT_22, 0)


def test_breakdown_to_dict():
    assert calculate_cost(NT_22, 1, with_delivery=True).to_dict() == {
        "basePrice": 45,
        "deliveryFee": 50,
        "weekendPickupFeeAmount": 0,
        "total": 95,
    }


def test_catalog_lookup(app):
    cost = calculate_rental_cost("nt-22-1", 1)
    assert (cost.base_price, cost.delivery_fee, cost.weekend_pickup_fee_amount, cost.total) == (45, 0, 0, 45)

    cost = calculate_rental_cost("nt-22-1", 3, with_delivery=True, is_weekend=True)
    assert cost.total == 200


def test_catalog_lookup_unknown_product(app):
    assert calculate_rental_cost("no-such-thing", 2) is None
    assert calculate_rental_cost("", 2) is None
