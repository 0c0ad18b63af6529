from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel

NO_CHANGE = "no_change"
CLEAR = "clear"
SET = "set"


@dataclass(frozen=True)
class ImageSignal:
    """What an incoming payload asks to do with a record's image reference.

    Decoded from the payload field rather than its value alone:
    omitted -> no_change, null or "" -> clear, a string -> set(address).
    """

    kind: str
    address: Optional[str] = None

    @classmethod
    def no_change(cls) -> "ImageSignal":
        return cls(NO_CHANGE)

    @classmethod
    def clear(cls) -> "ImageSignal":
        return cls(CLEAR)

    @classmethod
    def set(cls, address: str) -> "ImageSignal":
        if not address:
            raise ValueError("set() needs a non-empty address")
        return cls(SET, address)

    @classmethod
    def from_payload(cls, payload: BaseModel, field: str = "image_url") -> "ImageSignal":
        if field not in payload.model_fields_set:
            return cls.no_change()
        value = getattr(payload, field)
        if value is None or value == "":
            return cls.clear()
        return cls.set(value)

    @property
    def is_no_change(self) -> bool:
        return self.kind == NO_CHANGE

    @property
    def is_clear(self) -> bool:
        return self.kind == CLEAR

    @property
    def is_set(self) -> bool:
        return self.kind == SET

    def apply(self, current: Optional[str]) -> Optional[str]:
        """Return the image reference after applying this signal to ``current``."""
        if self.kind == SET:
            return self.address
        if self.kind == CLEAR:
            return None
        return current
