#foodcourt/data/models/cart.py
from sqlalchemy import Column, Integer, ForeignKey, Numeric
from sqlalchemy.orm import relationship

from foodcourt.data.database import Base


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True)
    #one cart per user
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)

    #derived from lines, recomputed on every mutation
    total_amount = Column(Numeric(10, 2), nullable=False, default=0)

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItemModel.id",
    )
