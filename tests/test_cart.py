from app.domain.shop.cart import Cart, CartItem


def item(product_id="p1", variant_id=None, price=10.0, quantity=1):
    return CartItem(product_id=product_id, variant_id=variant_id, price=price, quantity=quantity)


def test_same_line_merges_quantities():
    cart = Cart()
    cart.add_item(item(quantity=1))
    cart.add_item(item(quantity=2))
    assert len(cart) == 1
    assert cart.items[0].quantity == 3


def test_variants_are_separate_lines():
    cart = Cart([item(), item(variant_id="v1"), item(variant_id="v2")])
    assert len(cart) == 3


def test_none_variant_and_default_key_are_the_same_line():
    cart = Cart([item(variant_id=None), item(variant_id="")])
    assert len(cart) == 1
    assert cart.items[0].quantity == 2


def test_non_positive_quantities_are_dropped():
    cart = Cart([item(quantity=0), item(product_id="p2", quantity=-1)])
    assert len(cart) == 0


def test_update_quantity_and_remove():
    cart = Cart([item(), item(product_id="p2", variant_id="v1")])
    cart.update_quantity("p1", 5)
    assert cart.items[0].quantity == 5

    cart.update_quantity("p2", 0, variant_id="v1")
    assert [i.product_id for i in cart.items] == ["p1"]

    cart.remove_item("p1")
    assert len(cart) == 0


def test_update_quantity_ignores_missing_line():
    cart = Cart()
    cart.update_quantity("p1", 3)
    assert len(cart) == 0


def test_total_and_item_count():
    cart = Cart([item(price=10.0, quantity=2), item(product_id="p2", price=4.5, quantity=1)])
    assert cart.total == 24.5
    assert cart.item_count == 3

    cart.clear()
    assert cart.total == 0
    assert cart.item_count == 0


def test_to_checkout_items():
    cart = Cart([item(quantity=2), item(variant_id="v1")])
    assert cart.to_checkout_items() == [
        {"product_id": "p1", "variant_id": None, "quantity": 2},
        {"product_id": "p1", "variant_id": "v1", "quantity": 1},
    ]


def test_added_item_is_copied():
    original = item(quantity=1)
    cart = Cart([original])
    cart.add_item(item(quantity=1))
    assert original.quantity == 1
