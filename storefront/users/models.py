# storefront/users/models.py

from sqlalchemy import Column, String, DateTime
from datetime import datetime, timezone
from ..database.core import Base


class User(Base):
    """
    Local mirror of a user known to the identity provider.

    Carts and orders reference this row; deleting it cascades to both.
    """
    __tablename__ = 'users'

    id = Column(String(64), primary_key=True)  # identity provider subject
    email = Column(String(255), nullable=True, index=True)
    full_name = Column(String(200), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f"<User(id='{self.id}', email='{self.email}')>"
