import pytest

from printmaster.errors import ValidationError
from printmaster.models.line import CustomPrintLine, FileDetails
from printmaster.services.cart import Cart, line_from_product


def assert_line_totals(cart):
    for line in cart:
        assert line.total_price == line.unit_price * line.quantity


def custom_line(key, price=140, pages=50):
    return CustomPrintLine(
        line_id=key, name="Print: notes.pdf", category="Custom Print", unit_price=price, unit_cost=25,
        file_details=FileDetails(file_name="notes.pdf", file_url="#", page_count=pages),
    )


def test_add_same_product_increments(state):
    cart = Cart()
    bee = state.products["pf-bee"]
    cart.add_product(bee).add_product(bee)
    assert len(cart) == 1
    line = cart.get("pf-bee")
    assert line.quantity == 2
    assert line.total_price == 300
    assert_line_totals(cart)


def test_out_of_stock_product_rejected(state):
    cart = Cart()
    with pytest.raises(ValidationError):
        cart.add_product(state.products["pf-workshop"])
    assert len(cart) == 0


def test_custom_lines_never_merge():
    cart = Cart()
    cart.add_or_increment(custom_line("custom-1"))
    cart.add_or_increment(custom_line("custom-2"))
    assert len(cart) == 2
    assert [line.quantity for line in cart] == [1, 1]


def test_preconfigured_quantity_kept(state):
    cart = Cart()
    cart.add_or_increment(line_from_product(state.products["st-pen-blue"], quantity=5))
    assert cart.get("st-pen-blue").quantity == 5
    assert cart.get("st-pen-blue").total_price == 50


def test_update_quantity_floors_at_one(state):
    cart = Cart().add_product(state.products["pf-phy"])
    cart.update_quantity("pf-phy", 4)
    assert cart.get("pf-phy").quantity == 5
    cart.update_quantity("pf-phy", -10)
    assert cart.get("pf-phy").quantity == 1
    assert_line_totals(cart)


def test_update_missing_key_is_noop(state):
    cart = Cart().add_product(state.products["pf-phy"])
    version = cart.version
    cart.update_quantity("nope", 1).remove("nope")
    assert len(cart) == 1
    assert cart.version == version


def test_decrement_below_one_removes_line(state):
    cart = Cart().add_product(state.products["pf-bee"]).add_product(state.products["pf-bee"])
    cart.decrement("pf-bee")
    assert cart.get("pf-bee").quantity == 1
    cart.decrement("pf-bee")
    assert cart.get("pf-bee") is None
    assert len(cart) == 0


def test_clear_and_totals(state):
    cart = Cart().add_product(state.products["pf-bee"])
    cart.add_or_increment(custom_line("custom-1"))
    totals = cart.totals(urgent=True)
    assert (totals.subtotal, totals.urgent_fee, totals.total) == (290, 50, 340)
    cart.clear()
    assert len(cart) == 0
    assert cart.totals().total == 0


def test_restored_lines_dedupe_keys(state):
    line = line_from_product(state.products["pf-bee"])
    cart = Cart([line, line])
    assert len(cart) == 1
