"""Tests for decoding the three-valued image update signal."""

import pytest

from core.image_signal import ImageSignal
from schemas.categories import CategoryPayload


def test_omitted_field_is_no_change() -> None:
    signal = ImageSignal.from_payload(CategoryPayload(name="Exchange"))
    assert signal.is_no_change
    assert signal.apply("/uploads/a.png") == "/uploads/a.png"
    assert signal.apply(None) is None


def test_null_is_clear() -> None:
    signal = ImageSignal.from_payload(CategoryPayload(name="Exchange", image_url=None))
    assert signal.is_clear
    assert signal.apply("/uploads/a.png") is None


def test_empty_string_is_clear() -> None:
    signal = ImageSignal.from_payload(CategoryPayload(name="Exchange", image_url="  "))
    assert signal.is_clear


def test_address_is_set() -> None:
    signal = ImageSignal.from_payload(CategoryPayload(name="Exchange", image_url="/uploads/b.png"))
    assert signal.is_set
    assert signal.address == "/uploads/b.png"
    assert signal.apply("/uploads/a.png") == "/uploads/b.png"


def test_absolute_url_is_accepted() -> None:
    signal = ImageSignal.from_payload(CategoryPayload(name="Exchange", image_url="https://cdn.example.com/x.png"))
    assert signal.address == "https://cdn.example.com/x.png"


def test_other_strings_are_rejected() -> None:
    with pytest.raises(ValueError):
        CategoryPayload(name="Exchange", image_url="/etc/passwd")


def test_set_requires_address() -> None:
    with pytest.raises(ValueError):
        ImageSignal.set("")
