from decimal import Decimal
from typing import Iterable

from sqlalchemy.orm import Session

from app.data.models.cart_item import CartItemModel
from app.domain.errors import NotFound, OutOfStock
from app.domain.schemas import CartItemOut, CartOut
from app.repos.cart_repo import CartRepo
from app.repos.product_repo import ProductRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


def cart_total(items: Iterable[CartItemModel]) -> Decimal:
    return sum((i.product.price * i.quantity for i in items), Decimal("0.00"))


class CartService:
    """
    Use case'y koszyka, jedna pozycja na pare (user, produkt)
    commands (add, update, remove, clear) modyfikuja stan
    query (list) tylko odczyt
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    #query - odczyt
    def list_cart(self, user_id: int) -> CartOut:
        items = self.repo.get_cart_items(user_id)
        return CartOut(
            items=[CartItemOut.model_validate(i) for i in items],
            total_amount=cart_total(items),
            item_count=len(items),
        )

    #commands
    def add_item(self, user_id: int, product_id: int, quantity: int) -> tuple[CartItemOut, bool]:
        """Zwraca (pozycja, czy_nowa). Powtorne dodanie zwieksza ilosc."""
        if quantity < 1:
            raise ValueError("quantity must be >= 1")

        product = self.products.get_product(product_id)
        if not product:
            raise NotFound("Product not found")

        if not product.in_stock:
            raise OutOfStock()

        existing = self.repo.get_cart_item(user_id, product_id)

        if existing:
            logger.info(f"Product {product_id} already in cart of user {user_id}, quantity +{quantity}")
            self.repo.increment_quantity(existing.id, quantity)
            item = existing
            created = False
        else:
            logger.info(f"Adding product {product_id} to cart of user {user_id}")
            item = self.repo.add_cart_item(
                CartItemModel(
                    user_id=user_id,
                    product_id=product_id,
                    quantity=quantity,
                )
            )
            created = True

        self.repo.commit()
        self.repo.refresh(item)
        return CartItemOut.model_validate(item), created

    def update_item(self, user_id: int, product_id: int, quantity: int) -> CartItemOut | None:
        """quantity == 0 usuwa pozycje i zwraca None."""
        if quantity < 0:
            raise ValueError("quantity must be >= 0")

        item = self.repo.get_cart_item(user_id, product_id)
        if not item:
            raise NotFound("Cart item not found")

        if quantity == 0:
            self.repo.delete_cart_item(item)
            self.repo.commit()
            logger.info(f"Product {product_id} removed from cart of user {user_id}")
            return None

        item.quantity = quantity
        self.repo.commit()
        self.repo.refresh(item)
        logger.info(f"Product {product_id} quantity set to {quantity} for user {user_id}")
        return CartItemOut.model_validate(item)

    def remove_item(self, user_id: int, product_id: int) -> None:
        item = self.repo.get_cart_item(user_id, product_id)
        if not item:
            raise NotFound("Cart item not found")

        self.repo.delete_cart_item(item)
        self.repo.commit()
        logger.info(f"Product {product_id} removed from cart of user {user_id}")

    def clear_cart(self, user_id: int) -> int:
        removed = self.repo.clear(user_id)
        self.repo.commit()
        logger.info(f"Cart of user {user_id} cleared ({removed} items)")
        return removed
