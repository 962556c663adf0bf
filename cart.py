"""
Cart engine.

A user owns at most one cart document, created on the first add. Every
mutation is a read-modify-write of the whole ``items`` array without a
version check, so two concurrent mutations of the same cart can lose an
update (last write wins).
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from database import find_document, get_db, get_documents, public_document, to_object_id, update_document
from errors import MalformedInput, NotFound

logger = logging.getLogger(__name__)

COLLECTION = "cart"


class CartService:

    def get_cart_items(self, user_id: str) -> List[Dict[str, Any]]:
        """Display rows for the user's cart; an absent cart reads as empty."""
        user_oid = to_object_id(user_id, "userId", body_key="message")
        cart = find_document(COLLECTION, {"userId": user_oid})
        if not cart:
            return []

        rows = []
        for entry, item in self._populate(cart["items"]):
            if item is None:
                continue
            rows.append({
                "name": item.get("name"),
                "price": item.get("price"),
                "category": item.get("category"),
                "photo": item.get("photo"),
                "qty": entry.get("qty"),
            })
        return rows

    def add_item(self, user_id: str, item_id: str) -> Tuple[Dict[str, Any], bool]:
        """
        Add one unit of an item. Returns (cart, created).

        A new cart comes back as stored; an existing one comes back with each
        entry's itemId replaced by the item document.
        """
        user_oid = to_object_id(user_id, "userId")
        item_oid = to_object_id(item_id, "itemId")

        created_id = self._create_if_absent(user_oid, item_oid)
        if created_id is not None:
            logger.info(f"Created cart for user {user_id} with item {item_id}")
            return public_document(find_document(COLLECTION, {"_id": created_id})), True

        cart = find_document(COLLECTION, {"userId": user_oid})
        items = cart.get("items", [])
        for entry in items:
            if entry.get("itemId") == item_oid:
                entry["qty"] += 1
                break
        else:
            items.append({"itemId": item_oid, "qty": 1})

        update_document(COLLECTION, cart["_id"], {"items": items})
        logger.info(f"Added item {item_id} to cart of user {user_id}")

        cart = find_document(COLLECTION, {"_id": cart["_id"]})
        cart["items"] = [
            {"itemId": item, "qty": entry.get("qty")}
            for entry, item in self._populate(cart["items"])
        ]
        return public_document(cart), False

    def update_item(self, user_id: str, qty: int, item_name: str = None, item_id: str = None) -> None:
        """Overwrite the quantity of a cart entry. No bounds check on qty."""
        user_oid = to_object_id(user_id, "userId")
        cart = self._require_cart(user_oid, body_key="error")
        index = self._locate(cart, item_name, item_id)

        cart["items"][index]["qty"] = qty
        update_document(COLLECTION, cart["_id"], {"items": cart["items"]})
        logger.info(f"Set qty={qty} for {item_id if item_id is not None else item_name} in cart of user {user_id}")

    def delete_item(self, user_id: str, item_name: str = None, item_id: str = None) -> None:
        """Remove the first matching entry."""
        user_oid = to_object_id(user_id, "userId")
        cart = self._require_cart(user_oid, body_key="error")
        index = self._locate(cart, item_name, item_id)

        del cart["items"][index]
        update_document(COLLECTION, cart["_id"], {"items": cart["items"]})
        logger.info(f"Removed {item_id if item_id is not None else item_name} from cart of user {user_id}")

    def clear(self, user_id: str) -> None:
        user_oid = to_object_id(user_id, "userId", body_key="message")
        cart = self._require_cart(user_oid, body_key="message")
        update_document(COLLECTION, cart["_id"], {"items": [], "ordered": False})
        logger.info(f"Cart cleared for user {user_id}")

    # Helpers

    def _create_if_absent(self, user_oid: ObjectId, item_oid: ObjectId) -> Optional[ObjectId]:
        """Atomic find-or-create. Returns the new cart id, or None if one already existed."""
        now = datetime.now(timezone.utc)
        try:
            result = get_db()[COLLECTION].update_one(
                {"userId": user_oid},
                {"$setOnInsert": {
                    "items": [{"itemId": item_oid, "qty": 1}],
                    "ordered": False,
                    "created_at": now,
                    "updated_at": now,
                }},
                upsert=True,
            )
        except DuplicateKeyError:
            # a concurrent add created the cart between our match and insert
            return None
        return result.upserted_id

    def _require_cart(self, user_oid: ObjectId, body_key: str) -> Dict[str, Any]:
        cart = find_document(COLLECTION, {"userId": user_oid})
        if not cart:
            raise NotFound("Cart not found", body_key=body_key)
        cart.setdefault("items", [])
        return cart

    def _populate(self, entries: List[dict]) -> List[Tuple[dict, Optional[dict]]]:
        """Pair every cart entry with its item document, or None when the reference dangles."""
        ids = [entry["itemId"] for entry in entries if isinstance(entry.get("itemId"), ObjectId)]
        if not ids:
            return [(entry, None) for entry in entries]
        found = {item["_id"]: item for item in get_documents("item", {"_id": {"$in": ids}})}
        return [(entry, found.get(entry.get("itemId"))) for entry in entries]

    def _locate(self, cart: Dict[str, Any], item_name: str = None, item_id: str = None) -> int:
        """
        Index of the entry to mutate.

        itemId is the stable key; itemName is kept for existing clients and
        matches the populated item's display name.
        """
        if item_id is not None:
            item_oid = to_object_id(item_id, "itemId")
            for index, entry in enumerate(cart["items"]):
                if entry.get("itemId") == item_oid:
                    return index
            raise NotFound("Item not found in the cart")

        if item_name is None:
            raise MalformedInput("itemName or itemId is required")

        for index, (entry, item) in enumerate(self._populate(cart["items"])):
            if item is not None and item.get("name") == item_name:
                return index
        raise NotFound(f'Item "{item_name}" not found in cart')
