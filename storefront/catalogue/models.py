from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, CheckConstraint
from ..database.core import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(String(500), nullable=False, default="")

    def __repr__(self):
        return f"<Category(name='{self.name}')>"


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price >= 0.01", name="ck_products_price_positive"),
        CheckConstraint("stock_quantity >= 0", name="ck_products_stock_non_negative"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    description = Column(String(1000), nullable=False, default="")
    image_url = Column(String(500), nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False)
    # Only the inventory ledger writes this column
    stock_quantity = Column(Integer, nullable=False, default=0)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False, index=True)

    def __repr__(self):
        return f"<Product(name='{self.name}', stock={self.stock_quantity})>"
