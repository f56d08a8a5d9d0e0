import pytest

from backend.errors import ValidationError
from backend.invoices.line_items import build_bill_lines, format_amount


def test_single_item_unit_price_and_vat():
    items = [{"id": "A", "productName": "Widget", "quantity": 2, "subtotal": 10.00}]
    lines = build_bill_lines(items, shipping_cost=0)

    assert len(lines) == 1
    line = lines[0]
    assert line.reference == "A"
    assert line.name == "Widget"
    assert line.quantity == 2
    assert line.unit_price == "5.00"
    assert line.discount == 0
    assert line.vat_rate == "0.15"
    # Format GoPay (alias camelCase)
    assert line.model_dump(by_alias=True) == {
        "reference": "A",
        "name": "Widget",
        "quantity": 2,
        "unitPrice": "5.00",
        "discount": 0,
        "vat": "0.15",
    }


def test_one_line_per_item_in_order():
    items = [
        {"id": "1", "productName": "Chair", "quantity": 3, "subtotal": "10"},
        {"id": "2", "productName": "Table", "quantity": 1, "subtotal": 249.9},
        {"id": 3, "productName": "Lamp", "quantity": 4, "subtotal": 18},
    ]
    lines = build_bill_lines(items)

    assert [l.reference for l in lines] == ["1", "2", "3"]
    # 10 / 3 = 3.333.. -> 3.33 ; 249.9 -> 249.90 ; 18 / 4 = 4.5 -> 4.50
    assert [l.unit_price for l in lines] == ["3.33", "249.90", "4.50"]
    assert all(l.vat_rate == "0.15" for l in lines)


def test_unit_price_rounds_half_up():
    # 0.05 / 2 = 0.025 -> 0.03 (half-up, pas d'arrondi bancaire)
    lines = build_bill_lines([{"id": "X", "productName": "Sticker", "quantity": 2, "subtotal": "0.05"}])
    assert lines[0].unit_price == "0.03"


def test_shipping_line_appended_when_positive():
    items = [{"id": "A", "productName": "Widget", "quantity": 1, "subtotal": 20}]
    lines = build_bill_lines(items, shipping_cost=12.5)

    assert len(lines) == 2
    shipping = lines[-1]
    assert shipping.reference == "shipping"
    assert shipping.name == "Shipping"
    assert shipping.quantity == 1
    assert shipping.unit_price == "12.50"
    assert shipping.vat_rate == "0.15"


@pytest.mark.parametrize("shipping_cost", [None, 0, "0", -5, "abc"])
def test_no_shipping_line_when_absent_or_not_positive(shipping_cost):
    items = [{"id": "A", "productName": "Widget", "quantity": 1, "subtotal": 20}]
    lines = build_bill_lines(items, shipping_cost=shipping_cost)
    assert [l.reference for l in lines] == ["A"]


@pytest.mark.parametrize("items", [[], None, {"id": "A"}])
def test_empty_cart_raises(items):
    with pytest.raises(ValidationError) as exc:
        build_bill_lines(items)
    assert exc.value.status_code == 400
    assert exc.value.message == "Empty cart: no items to bill."


def test_zero_quantity_is_rejected():
    with pytest.raises(ValidationError) as exc:
        build_bill_lines([{"id": "A", "productName": "Widget", "quantity": 0, "subtotal": 10}])
    assert exc.value.status_code == 400
    assert "quantity" in exc.value.message


def test_non_numeric_subtotal_is_rejected():
    with pytest.raises(ValidationError):
        build_bill_lines([{"id": "A", "productName": "Widget", "quantity": 1, "subtotal": "ten"}])


@pytest.mark.parametrize(
    "value, expected",
    [(10, "10.00"), ("7.3", "7.30"), (2.675, "2.68"), (None, "0.00"), ("n/a", "0.00"), (True, "0.00")],
)
def test_format_amount(value, expected):
    assert format_amount(value) == expected


@pytest.mark.parametrize("value", ["1e27", 10**30, "123456789012345678901234567890.5"])
def test_format_amount_out_of_range(value):
    with pytest.raises(ValidationError) as exc:
        format_amount(value)
    assert exc.value.status_code == 400
    assert "out of range" in exc.value.message


def test_huge_subtotal_is_rejected():
    with pytest.raises(ValidationError) as exc:
        build_bill_lines([{"id": "A", "productName": "Widget", "quantity": 3, "subtotal": "1e30"}])
    assert exc.value.status_code == 400


def test_huge_shipping_cost_is_rejected():
    items = [{"id": "A", "productName": "Widget", "quantity": 1, "subtotal": 20}]
    with pytest.raises(ValidationError):
        build_bill_lines(items, shipping_cost="1e28")
