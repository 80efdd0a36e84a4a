# Role: The order being filled in by the order form. Fields are set progressively across turns and the
# record only leaves the form once both are present and the user confirmed.

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel


class OrderRecord(BaseModel):
    item: Optional[Union[str, List[str]]] = None

    # TIMEX-like date string, e.g. "2020-03-22" or "XXXX-03-22" (no year yet).
    delivery_date: Optional[str] = None

    def has_item(self) -> bool:
        if isinstance(self.item, list):
            return any(isinstance(i, str) and i.strip() for i in self.item)
        return bool(self.item and self.item.strip())

    def item_text(self) -> str:
        # "rice" / "rice and sugar" / "rice, sugar and wheat"
        if isinstance(self.item, list):
            items = [i.strip() for i in self.item if isinstance(i, str) and i.strip()]
            if not items:
                return ""
            if len(items) == 1:
                return items[0]
            return f"{', '.join(items[:-1])} and {items[-1]}"
        return (self.item or "").strip()
