import enum
from datetime import datetime, timezone
from sqlalchemy import (
    Column, String, Integer, Numeric, DateTime, ForeignKey, Enum, CheckConstraint, event, inspect
)
from sqlalchemy.orm import relationship
from ..database.core import Base
from ..core.exceptions import InvalidTransitionError, InvalidStateError


class OrderStatus(str, enum.Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    RETURNED = "Returned"


# Every status change must appear here; terminal states map to nothing
ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: {OrderStatus.RETURNED},
    OrderStatus.CANCELLED: set(),
    OrderStatus.RETURNED: set(),
}

# Write-once columns: only status (and updated_at) may change after insert
IMMUTABLE_ORDER_FIELDS = (
    "user_id",
    "created_at",
    "shipping_address",
    "phone_number",
    "notes",
    "total_amount",
)


class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint("total_amount >= 0", name="ck_orders_total_non_negative"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(Enum(OrderStatus, name="order_status"), nullable=False, default=OrderStatus.PENDING)
    # Computed once at checkout from the prices read in that transaction
    total_amount = Column(Numeric(12, 2), nullable=False)
    shipping_address = Column(String(500), nullable=False)
    phone_number = Column(String(20), nullable=True)
    notes = Column(String(1000), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    lines = relationship(
        "OrderLine",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderLine.id",
    )

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self.lines)

    def can_transition_to(self, new_status: OrderStatus) -> bool:
        return new_status in ALLOWED_TRANSITIONS[OrderStatus(self.status)]

    def transition_to(self, new_status: OrderStatus) -> None:
        """Move the order along the status state machine."""
        new_status = OrderStatus(new_status)
        if not self.can_transition_to(new_status):
            raise InvalidTransitionError(OrderStatus(self.status).value, new_status.value)
        self.status = new_status
        self.updated_at = datetime.now(timezone.utc)

    def __repr__(self):
        return f"<Order(id={self.id}, status='{self.status}')>"


class OrderLine(Base):
    __tablename__ = "order_lines"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_order_lines_quantity_positive"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False, index=True)
    product_name = Column(String(200), nullable=False)
    quantity = Column(Integer, nullable=False)
    # Price at purchase time, independent of the live product price
    unit_price = Column(Numeric(10, 2), nullable=False)

    order = relationship("Order", back_populates="lines")

    @property
    def line_total(self):
        return self.unit_price * self.quantity


@event.listens_for(Order, "before_update")
def _reject_order_snapshot_changes(mapper, connection, target):
    state = inspect(target)
    changed = [name for name in IMMUTABLE_ORDER_FIELDS if state.attrs[name].history.has_changes()]
    if changed:
        raise InvalidStateError(
            f"Order {target.id} fields are write-once: {', '.join(changed)}",
            context={"orderId": target.id, "fields": changed},
        )


@event.listens_for(OrderLine, "before_update")
def _reject_order_line_changes(mapper, connection, target):
    state = inspect(target)
    changed = [attr.key for attr in state.mapper.column_attrs if state.attrs[attr.key].history.has_changes()]
    if changed:
        raise InvalidStateError(
            f"Order line {target.id} is immutable",
            context={"orderLineId": target.id, "fields": changed},
        )
