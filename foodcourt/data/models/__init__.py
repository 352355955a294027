#import every model so SQLAlchemy registers it in Base.metadata

from foodcourt.data.models.user import UserModel
from foodcourt.data.models.stall import StallModel
from foodcourt.data.models.menu_item import MenuItemModel
from foodcourt.data.models.cart import CartModel
from foodcourt.data.models.cart_item import CartItemModel
from foodcourt.data.models.order import OrderModel
from foodcourt.data.models.order_item import OrderItemModel
from foodcourt.data.models.payment import PaymentModel
from foodcourt.data.models.rating import RatingModel
from foodcourt.data.models.report import ReportModel

__all__ = [
    "UserModel",
    "StallModel",
    "MenuItemModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "OrderItemModel",
    "PaymentModel",
    "RatingModel",
    "ReportModel",
]
