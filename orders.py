import logging
from typing import Any, Dict, List

from pymongo.errors import PyMongoError

from cart import CartService
from database import create_document, public_document
from errors import ShopError, StoreFailure
from schemas import Order, OrderItem

logger = logging.getLogger(__name__)


def create_order(user_id: str, items: List[OrderItem], total_price: float) -> Dict[str, Any]:
    """
    Store an order snapshot, then empty the user's cart.

    The two writes are independent: a failed cart clear is logged and the
    order still stands. totalPrice is stored as given.
    """
    order = Order(userId=user_id, items=items, totalPrice=total_price)
    try:
        saved = create_document("order", order)
    except PyMongoError as e:
        logger.error(f"Error creating order: {e}")
        raise StoreFailure("Failed to create order")

    _clear_cart_items(user_id)
    return public_document(saved)


def _clear_cart_items(user_id: str) -> None:
    try:
        CartService().clear(user_id)
        logger.info(f"Cart items cleared for user: {user_id}")
    except (ShopError, PyMongoError) as e:
        logger.warning(f"Error clearing cart items for user {user_id}: {e}")
