"""
Shopping cart with a WhatsApp order hand-off
"""

from __future__ import annotations

import json
import logging
from typing import List
from urllib.parse import quote

from amanice.errors import StorageQuotaError, ValidationError
from amanice.integrations.contracts.interfaces import CartLine, KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_PHONE_NUMBER = "27731635803"
MESSAGE_HEADER = "Hi AMA-NICE! I'd like to order the following items:\n\n"
MESSAGE_FOOTER = "\nPlease let me know about availability and payment details."
EMPTY_CART_MESSAGE = "Your cart is empty!"
URI_COMPONENT_SAFE = "-_.!~*'()"


def build_order_message(lines: List[CartLine]) -> str:
    message = MESSAGE_HEADER
    for line in lines:
        message += f"• {line.name} - {line.price_range}\n"
    return message + MESSAGE_FOOTER


def whatsapp_link(phone_number: str, message: str) -> str:
    return f"https://wa.me/{phone_number}?text={quote(message, safe=URI_COMPONENT_SAFE)}"


class ShoppingCart:
    def __init__(self, store: KeyValueStore, phone_number: str = DEFAULT_PHONE_NUMBER, key: str = "cart") -> None:
        self.store = store
        self.phone_number = phone_number
        self.key = key
        self._lines: List[CartLine] = self._load()

    def _load(self) -> List[CartLine]:
        raw = self.store.get(self.key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Stored cart '%s' is not valid JSON; starting empty", self.key)
            return []
        if not isinstance(data, list):
            return []
        return [
            CartLine(name=str(item.get("name", "")), price_range=str(item.get("priceRange", "")))
            for item in data
            if isinstance(item, dict)
        ]

    def _save(self) -> None:
        payload = [{"name": line.name, "priceRange": line.price_range} for line in self._lines]
        try:
            self.store.set(self.key, json.dumps(payload))
        except StorageQuotaError as e:
            logger.warning("Could not persist cart '%s': %s", self.key, e.message)

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines)

    @property
    def count(self) -> int:
        return len(self._lines)

    def add_item(self, name: str, price_range: str) -> None:
        """Append a line; the same item twice gives two lines"""
        self._lines.append(CartLine(name=name, price_range=price_range))
        self._save()

    def remove_item(self, index: int) -> None:
        """Remove by position; indexes outside the cart are ignored"""
        if 0 <= index < len(self._lines):
            del self._lines[index]
            self._save()

    def clear(self) -> None:
        self._lines = []
        self._save()

    def checkout(self) -> str:
        """Return the wa.me link carrying the order message"""
        if not self._lines:
            raise ValidationError(EMPTY_CART_MESSAGE)
        return whatsapp_link(self.phone_number, build_order_message(self._lines))

    def to_dict(self) -> dict:
        return {"items": [{"name": line.name, "priceRange": line.price_range} for line in self._lines], "count": self.count}
