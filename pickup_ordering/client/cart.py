"""
Cart Store with File Locking

Client-resident cart for the ordering client. Entries survive restarts in
a local JSON file under a fixed cart key, with no expiry. The cart is only
a list of intentions: the server prices every order from its own catalog,
so only item ids and quantities ever leave this module.

Version: 1.0.0
"""

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Optional

from filelock import FileLock, Timeout

from pickup_ordering.core.config import get_settings
from pickup_ordering.schemas import normalize_quantity

logger = logging.getLogger(__name__)

CART_KEY = "pkc_cart"


@dataclass(frozen=True)
class CartLine:
    """One "add to cart" action."""
    item_id: int
    display_name: str
    quantity: int = 1

    def to_payload(self) -> dict[str, int]:
        """Wire form sent with an order: identity and quantity only."""
        return {"id": self.item_id, "qty": self.quantity}


def _coerce_line(raw: Any) -> Optional[CartLine]:
    if not isinstance(raw, dict):
        return None
    try:
        return CartLine(
            item_id=int(raw["item_id"]),
            display_name=str(raw.get("display_name", "")),
            quantity=normalize_quantity(raw.get("quantity")),
        )
    except (KeyError, TypeError, ValueError, OverflowError):
        return None


class CartStore:
    """
    Append/remove/clear cart persisted to a JSON file.

    Every mutation is written through immediately, so a new ``CartStore``
    on the same path sees the same lines.
    """

    def __init__(
        self,
        path: Optional[Path] = None,
        cart_key: str = CART_KEY,
        lock_timeout: Optional[int] = None,
    ):
        settings = get_settings()
        self.path = Path(path) if path else Path(settings.data_directory) / settings.cart_filename
        self.cart_key = cart_key
        self.lock_timeout = lock_timeout if lock_timeout is not None else settings.cart_lock_timeout
        self._lock_path = self.path.with_name(self.path.name + ".lock")
        self._lines: list[CartLine] = self._load()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _read_all(self) -> dict[str, Any]:
        """Whole cart file; unreadable content counts as empty."""
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable cart file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _load(self) -> list[CartLine]:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with FileLock(str(self._lock_path), timeout=self.lock_timeout):
                raw_lines = self._read_all().get(self.cart_key, [])
        except Timeout:
            logger.error(f"Lock timeout ({self.lock_timeout}s) reading {self.path}")
            raise

        if not isinstance(raw_lines, list):
            return []
        lines = [_coerce_line(raw) for raw in raw_lines]
        return [line for line in lines if line is not None]

    def _save(self) -> None:
        try:
            with FileLock(str(self._lock_path), timeout=self.lock_timeout):
                data = self._read_all()
                if self._lines:
                    data[self.cart_key] = [asdict(line) for line in self._lines]
                else:
                    data.pop(self.cart_key, None)

                tmp_path = self.path.with_name(self.path.name + ".tmp")
                tmp_path.write_text(json.dumps(data), encoding="utf-8")
                os.replace(tmp_path, self.path)
        except Timeout:
            logger.error(f"Lock timeout ({self.lock_timeout}s) writing {self.path}")
            raise

    # ------------------------------------------------------------------
    # Cart operations
    # ------------------------------------------------------------------

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines)

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def add(self, item_id: int, display_name: str, quantity: Any = 1) -> CartLine:
        """Append a line. The quantity is normalized the way the server does it."""
        qty = normalize_quantity(quantity)
        line = CartLine(item_id=int(item_id), display_name=display_name, quantity=qty)
        self._lines.append(line)
        self._save()
        logger.debug(f"Cart +{qty} x {display_name} (item {item_id})")
        return line

    def remove(self, index: int) -> CartLine:
        """Remove the line at ``index``. Raises IndexError if there is none."""
        if not 0 <= index < len(self._lines):
            raise IndexError(f"No cart line at position {index}")
        line = self._lines.pop(index)
        self._save()
        return line

    def clear(self) -> None:
        self._lines = []
        self._save()

    def to_payload(self) -> list[dict[str, int]]:
        return [line.to_payload() for line in self._lines]
