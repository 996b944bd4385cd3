import pytest
from decimal import Decimal

from storefront.orders.models import Order, OrderLine, OrderStatus, ALLOWED_TRANSITIONS
from storefront.users.models import User
from storefront.core.exceptions import InvalidTransitionError, InvalidStateError


@pytest.fixture
def order(db_session, product_a):
    db_session.add(User(id="user-1", email="ada@example.com"))
    db_session.flush()
    order = Order(
        user_id="user-1",
        status=OrderStatus.PENDING,
        total_amount=Decimal("20.00"),
        shipping_address="12 Nile Street, Cairo",
    )
    order.lines.append(OrderLine(
        product_id=product_a.id,
        product_name=product_a.name,
        quantity=2,
        unit_price=Decimal("10.00"),
    ))
    db_session.add(order)
    db_session.commit()
    return order


@pytest.mark.parametrize("current,target", [
    (OrderStatus.PENDING, OrderStatus.CONFIRMED),
    (OrderStatus.PENDING, OrderStatus.CANCELLED),
    (OrderStatus.CONFIRMED, OrderStatus.PROCESSING),
    (OrderStatus.CONFIRMED, OrderStatus.CANCELLED),
    (OrderStatus.PROCESSING, OrderStatus.SHIPPED),
    (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
    (OrderStatus.DELIVERED, OrderStatus.RETURNED),
])
def test_allowed_transitions(current, target):
    order = Order(status=current)
    order.transition_to(target)
    assert order.status == target


@pytest.mark.parametrize("current,target", [
    (OrderStatus.PENDING, OrderStatus.SHIPPED),
    (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
    (OrderStatus.SHIPPED, OrderStatus.PENDING),
    (OrderStatus.DELIVERED, OrderStatus.CANCELLED),
])
def test_disallowed_transitions(current, target):
    order = Order(status=current)
    with pytest.raises(InvalidTransitionError):
        order.transition_to(target)
    assert order.status == current


def test_terminal_states_have_no_exits():
    for status in (OrderStatus.CANCELLED, OrderStatus.RETURNED):
        assert ALLOWED_TRANSITIONS[status] == set()
        order = Order(status=status)
        for target in OrderStatus:
            assert not order.can_transition_to(target)


def test_status_change_persists(db_session, order):
    order.transition_to(OrderStatus.CONFIRMED)
    db_session.commit()
    db_session.expire_all()
    assert db_session.get(Order, order.id).status == OrderStatus.CONFIRMED


def test_snapshot_fields_are_write_once(db_session, order):
    order.total_amount = Decimal("1.00")
    with pytest.raises(InvalidStateError):
        db_session.flush()
    db_session.rollback()

    assert db_session.get(Order, order.id).total_amount == Decimal("20.00")


def test_order_lines_are_immutable(db_session, order):
    order.lines[0].unit_price = Decimal("1.00")
    with pytest.raises(InvalidStateError):
        db_session.flush()
    db_session.rollback()


def test_totals_from_lines(order):
    assert order.total_items == 2
    assert order.lines[0].line_total == Decimal("20.00")
