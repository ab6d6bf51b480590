from types import SimpleNamespace

from printmaster.services.pricing import OrderTotals, PriceEngine


def line(price, qty, cost=0):
    return SimpleNamespace(unit_price=price, quantity=qty, unit_cost=cost)


def test_empty_lines_give_zero_totals():
    assert PriceEngine().totals([]) == OrderTotals()
    assert PriceEngine().totals([], urgent=True).urgent_fee == 50


def test_totals_and_profit():
    totals = PriceEngine().totals([line(150, 2, cost=80), line(10, 3, cost=4)])
    assert totals.subtotal == 330
    assert totals.cost_total == 172
    assert totals.urgent_fee == 0
    assert totals.total == 330
    assert totals.profit == 158


def test_urgent_fee_is_flat_per_order():
    few = PriceEngine().totals([line(10, 1)], urgent=True)
    many = PriceEngine().totals([line(10, 40), line(500, 3)], urgent=True)
    assert few.urgent_fee == many.urgent_fee == 50
    assert many.total == many.subtotal + 50
    assert many.profit == many.total - many.cost_total


def test_custom_print_price():
    engine = PriceEngine()
    assert engine.custom_print_price(50, "BW", "Spiral") == 140
    assert engine.custom_print_price(50, "Color", "None") == 500
    assert engine.custom_print_price(10, "BW", "Wire") == 80
    assert engine.custom_print_price(10, "Color", "Hard") == 300


def test_inputs_are_not_mutated():
    lines = [line(150, 1)]
    PriceEngine().totals(lines, urgent=True)
    assert lines[0].quantity == 1 and lines[0].unit_price == 150
