#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from app.data.models.user import UserModel
from app.data.models.credential import CredentialModel
from app.data.models.product import ProductModel
from app.data.models.cart_item import CartItemModel
from app.data.models.order import OrderModel, OrderItemModel, PaymentModel, OrderStatus, PaymentStatus
from app.data.models.message import MessageModel

__all__ = [
    "UserModel",
    "CredentialModel",
    "ProductModel",
    "CartItemModel",
    "OrderModel",
    "OrderItemModel",
    "PaymentModel",
    "OrderStatus",
    "PaymentStatus",
    "MessageModel",
]
