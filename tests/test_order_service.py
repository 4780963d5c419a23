from datetime import timedelta
from decimal import Decimal

import pytest

from backoffice.core.errors import NotFoundError
from backoffice.models import Order, OrderItem
from backoffice.pricing.engine import PromotionTerms
from backoffice.repositories.promotions import SqlPromotionSource
from backoffice.schemas.order import OrderCreate, OrderRead, OrderUpdate
from backoffice.services.order_service import OrderService

D = Decimal


def payload(*pairs, **kw):
    kw.setdefault("delivery_address", "Calle Mayor 1, Madrid")
    return OrderCreate(items=[{"product_id": p, "quantity": q} for p, q in pairs], **kw)


@pytest.fixture
def service(db, fixed_now):
    return OrderService(db, promotions=SqlPromotionSource(db, now=fixed_now))


def test_create_order_for_requesting_user(service, products, client):
    beans, frother, filters = products

    order = service.create(payload((beans.id, 1), (filters.id, 3), delivery_notes="Ring twice"), user_id="user-1")

    assert order.id is not None
    assert order.client_id == client.id
    assert order.total == D("130.00")
    assert order.delivery_address == "Calle Mayor 1, Madrid"
    assert order.delivery_notes == "Ring twice"
    assert [(it.product_id, it.quantity, it.unit_price) for it in order.items] == [
        (beans.id, 1, D("100.00")),
        (filters.id, 3, D("10.00")),
    ]


def test_explicit_client_overrides_requester(service, products, client, other_client):
    order = service.create(payload((products[0].id, 1), client_id=other_client.id), user_id="user-1")
    assert order.client_id == other_client.id


def test_explicit_client_must_exist(service, db, products, client):
    with pytest.raises(NotFoundError):
        service.create(payload((products[0].id, 1), client_id=404), user_id="user-1")
    assert db.query(Order).count() == 0


def test_requester_without_profile_is_not_found(service, db, products):
    with pytest.raises(NotFoundError) as exc:
        service.create(payload((products[0].id, 1)), user_id="ghost")

    assert "ghost" in str(exc.value)
    assert db.query(Order).count() == 0


def test_unknown_product_persists_nothing(service, db, products, client):
    with pytest.raises(NotFoundError) as exc:
        service.create(payload((products[0].id, 1), (999, 1)), user_id="user-1")

    assert str(exc.value) == "Product with ID 999 not found"
    assert db.query(Order).count() == 0
    assert db.query(OrderItem).count() == 0


def test_global_promotions_stack_in_creation_order(service, products, client, add_promotion):
    add_promotion(25)
    add_promotion(10)

    order = service.create(payload((products[0].id, 1), (products[1].id, 1)), user_id="user-1")

    assert order.total == D("135.00")


def test_targeted_promotion_only_hits_listed_products(service, products, client, add_promotion):
    beans, frother, filters = products
    add_promotion(50, products=[filters])

    order = service.create(payload((beans.id, 1), (filters.id, 4)), user_id="user-1")

    # 100 + 40, minus half of the filters
    assert order.total == D("120.00")


def test_inactive_and_out_of_window_promotions_are_ignored(service, products, client, add_promotion, fixed_now):
    add_promotion(50, active=False)
    add_promotion(50, ends_at=fixed_now - timedelta(days=1))
    add_promotion(50, starts_at=fixed_now + timedelta(days=1))
    add_promotion(10, starts_at=fixed_now - timedelta(days=1), ends_at=fixed_now + timedelta(days=1))

    order = service.create(payload((products[0].id, 1)), user_id="user-1")

    assert order.total == D("90.00")


def test_total_is_stored_in_cents(service, products, client, add_promotion):
    add_promotion("33.33")

    order = service.create(payload((products[2].id, 1)), user_id="user-1")

    # 10.00 - 3.333
    assert order.total == D("6.67")


def test_total_never_negative_when_discounts_exceed_price(service, products, client, add_promotion):
    add_promotion(80, products=[products[0]])
    add_promotion(80, products=[products[0]])

    order = service.create(payload((products[0].id, 1)), user_id="user-1")

    assert order.total == D("0.00")


def test_unit_price_snapshot_survives_catalog_change(service, db, products, client):
    beans = products[0]
    order = service.create(payload((beans.id, 2)), user_id="user-1")

    beans.price = D("80.00")
    db.commit()
    db.expire_all()

    stored = service.find_one(order.id)
    assert stored.items[0].unit_price == D("100.00")
    assert stored.items[0].product.price == D("80.00")
    assert stored.total == D("200.00")


def test_service_accepts_injected_collaborators(db, products, client, make_catalog, make_promotions):
    beans = products[0]
    service = OrderService(
        db,
        catalog=make_catalog({beans.id: "50.00"}),
        promotions=make_promotions([PromotionTerms.of(10)]),
    )
    order = service.create(payload((beans.id, 2)), user_id="user-1")

    assert order.items[0].unit_price == D("50.00")
    assert order.total == D("90.00")


def test_find_all_and_find_one(service, products, client):
    first = service.create(payload((products[0].id, 1)), user_id="user-1")
    second = service.create(payload((products[1].id, 1)), user_id="user-1")

    assert [o.id for o in service.find_all()] == [first.id, second.id]
    assert service.find_one(second.id).id == second.id


def test_find_one_missing_order(service):
    with pytest.raises(NotFoundError) as exc:
        service.find_one(999)
    assert str(exc.value) == "Order with ID 999 not found"


def test_find_by_client_newest_first(service, products, client, other_client):
    first = service.create(payload((products[0].id, 1)), user_id="user-1")
    service.create(payload((products[0].id, 1), client_id=other_client.id), user_id="user-1")
    second = service.create(payload((products[1].id, 1)), user_id="user-1")

    assert [o.id for o in service.find_by_client(client.id)] == [second.id, first.id]


def test_find_my_orders(service, products, client, other_client):
    mine = service.create(payload((products[0].id, 1)), user_id="user-1")
    service.create(payload((products[0].id, 1)), user_id="user-2")

    assert [o.id for o in service.find_my_orders("user-1")] == [mine.id]


def test_find_my_orders_without_profile(service):
    with pytest.raises(NotFoundError):
        service.find_my_orders("ghost")


def test_update_does_not_reprice(service, products, client, add_promotion):
    order = service.create(payload((products[0].id, 1), delivery_notes="Leave at door"), user_id="user-1")
    add_promotion(50)

    updated = service.update(order.id, OrderUpdate(delivery_address="Gran Via 2", delivery_notes=None))

    assert updated.delivery_address == "Gran Via 2"
    assert updated.delivery_notes is None
    assert updated.total == D("100.00")


def test_update_total_explicitly(service, products, client):
    order = service.create(payload((products[0].id, 1)), user_id="user-1")

    updated = service.update(order.id, OrderUpdate(total="87.555"))

    assert updated.total == D("87.56")


def test_update_ignores_null_for_required_fields(service, products, client):
    order = service.create(payload((products[0].id, 1)), user_id="user-1")

    updated = service.update(order.id, OrderUpdate(total=None, delivery_address=None))

    assert updated.total == D("100.00")
    assert updated.delivery_address == "Calle Mayor 1, Madrid"


def test_update_missing_order(service):
    with pytest.raises(NotFoundError):
        service.update(999, OrderUpdate(delivery_notes="x"))


def test_remove_deletes_order_and_items(service, db, products, client):
    order = service.create(payload((products[0].id, 1), (products[2].id, 2)), user_id="user-1")

    service.remove(order.id)

    assert db.query(Order).count() == 0
    assert db.query(OrderItem).count() == 0
    with pytest.raises(NotFoundError):
        service.remove(order.id)


def test_order_read_includes_client_and_products(service, products, client):
    order = service.create(payload((products[0].id, 2)), user_id="user-1")

    out = OrderRead.model_validate(service.find_one(order.id))

    assert out.client.name == "Ana Ruiz"
    assert out.items[0].product.name == "Espresso beans 1kg"
    assert out.items[0].product.image == "img/beans.png"
    assert out.calculated_subtotal == D("200.00")
    assert out.total == D("200.00")
