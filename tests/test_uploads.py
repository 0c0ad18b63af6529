"""Tests for the local upload gateway and its HTTP surface."""

import os
import re
from pathlib import Path

import pytest
from starlette.datastructures import UploadFile

import core.uploads as uploads_module
from conftest import PNG_BYTES, upload_exists
from core.errors import PayloadTooLargeError, UnsupportedMediaTypeError
from core.uploads import UploadGateway

MiB = 1024 * 1024


@pytest.fixture
def gateway(tmp_path: Path) -> UploadGateway:
    return UploadGateway(str(tmp_path / "uploads"))


@pytest.mark.anyio
@pytest.mark.parametrize(
    "content_type,ext",
    [("image/jpeg", ".jpg"), ("image/png", ".png"), ("image/webp", ".webp"), ("image/gif", ".gif")],
)
async def test_accept_derives_extension(gateway: UploadGateway, content_type: str, ext: str) -> None:
    address = await gateway.accept(PNG_BYTES, content_type, "photo.dat")
    assert re.fullmatch(r"/uploads/\d+_[0-9a-f]{12}" + re.escape(ext), address)
    with open(gateway.path_for(address), "rb") as fh:
        assert fh.read() == PNG_BYTES


@pytest.mark.anyio
async def test_accept_names_are_unique(gateway: UploadGateway) -> None:
    a = await gateway.accept(PNG_BYTES, "image/png")
    b = await gateway.accept(PNG_BYTES, "image/png")
    assert a != b


@pytest.mark.anyio
async def test_unsupported_type_is_rejected(gateway: UploadGateway) -> None:
    with pytest.raises(UnsupportedMediaTypeError):
        await gateway.accept(PNG_BYTES, "application/pdf", "doc.pdf")
    assert not os.path.exists(gateway.directory)


@pytest.mark.anyio
async def test_six_mib_is_too_large(gateway: UploadGateway) -> None:
    with pytest.raises(PayloadTooLargeError):
        await gateway.accept(b"\x00" * (6 * MiB), "image/jpeg", "big.jpg")
    assert not os.path.exists(gateway.directory)


@pytest.mark.anyio
async def test_exactly_five_mib_is_accepted(gateway: UploadGateway) -> None:
    address = await gateway.accept(b"\x00" * (5 * MiB), "image/jpeg")
    assert os.path.getsize(gateway.path_for(address)) == 5 * MiB


@pytest.mark.anyio
async def test_remove_deletes_file(gateway: UploadGateway) -> None:
    address = await gateway.accept(PNG_BYTES, "image/png")
    await gateway.remove(address)
    assert not os.path.exists(gateway.path_for(address))


@pytest.mark.anyio
@pytest.mark.parametrize(
    "address",
    [None, "", "/uploads/missing.png", "https://cdn.example.com/a.png", "/uploads/../secret.txt", "/etc/passwd"],
)
async def test_remove_never_raises(gateway: UploadGateway, tmp_path: Path, address) -> None:
    secret = tmp_path / "secret.txt"
    secret.write_text("keep me")
    await gateway.remove(address)
    assert secret.exists()


def test_is_local(gateway: UploadGateway) -> None:
    assert gateway.is_local("/uploads/a.png")
    assert not gateway.is_local("/uploads/../a.png")
    assert not gateway.is_local("https://cdn.example.com/uploads/a.png")
    assert not gateway.is_local(None)


def test_upload_endpoint_stores_and_serves(client) -> None:
    res = client.post("/api/upload", files={"file": ("logo.png", PNG_BYTES, "image/png")})
    assert res.status_code == 201
    address = res.json()["address"]
    assert address.startswith("/uploads/") and address.endswith(".png")

    served = client.get(address)
    assert served.status_code == 200
    assert served.content == PNG_BYTES


def test_upload_endpoint_rejects_type(client) -> None:
    res = client.post("/api/upload", files={"file": ("doc.pdf", b"%PDF-1.4", "application/pdf")})
    assert res.status_code == 415
    assert "Unsupported" in res.json()["detail"]


def test_upload_endpoint_rejects_size(client) -> None:
    res = client.post("/api/upload", files={"file": ("big.jpg", b"\x00" * (6 * MiB), "image/jpeg")})
    assert res.status_code == 413


def test_upload_endpoint_requires_file(client) -> None:
    res = client.post("/api/upload")
    assert res.status_code == 400


def test_delete_endpoint_always_acknowledges(client, upload) -> None:
    address = upload()
    assert client.delete("/api/upload", params={"address": address}).json() == {"ok": True}
    assert not upload_exists(address)
    assert client.delete("/api/upload", params={"address": address}).json() == {"ok": True}


def test_upload_requires_session(anon_client) -> None:
    res = anon_client.post("/api/upload", files={"file": ("logo.png", PNG_BYTES, "image/png")})
    assert res.status_code == 401


@pytest.mark.anyio
async def test_disk_io_runs_in_threadpool(gateway: UploadGateway, monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []

    async def inline(func, *args):
        calls.append(func)
        return func(*args)

    monkeypatch.setattr(uploads_module, "run_in_threadpool", inline)
    address = await gateway.accept(PNG_BYTES, "image/png")
    await gateway.remove(address)

    assert calls[0] == gateway._write
    assert calls[1] is os.remove
    assert not os.path.exists(gateway.path_for(address))


def test_oversized_upload_rejected_before_buffering(client, monkeypatch: pytest.MonkeyPatch) -> None:
    async def read_forbidden(self, size: int = -1) -> bytes:
        raise AssertionError("oversized upload was read into memory")

    monkeypatch.setattr(UploadFile, "read", read_forbidden)
    res = client.post("/api/upload", files={"file": ("big.jpg", b"\x00" * (6 * MiB), "image/jpeg")})
    assert res.status_code == 413
    assert "too large" in res.json()["detail"]
