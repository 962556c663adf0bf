import logging
import re
from typing import Any, Dict, List

from pymongo.errors import PyMongoError

from config import settings
from database import get_documents, public_document
from errors import MalformedInput, StoreFailure

logger = logging.getLogger(__name__)


def list_items(start: int = 0, limit: int = 0, category: str = "") -> List[Dict[str, Any]]:
    """
    One page of the catalog.

    category is a case-insensitive pattern; empty means every category.
    A zero limit falls back to the configured page size. No total count is
    returned, a short page marks the end.
    """
    limit = limit or settings.items_page_size
    filter_dict = {}
    if category:
        try:
            re.compile(category)
        except re.error:
            raise MalformedInput("Invalid category pattern", body_key="message")
        filter_dict["category"] = {"$regex": category, "$options": "i"}

    try:
        items = get_documents("item", filter_dict, skip=start, limit=limit)
    except PyMongoError as e:
        logger.error(f"Error fetching items: {e}")
        raise StoreFailure("Error fetching items", body_key="message")
    return [public_document(item) for item in items]
