from __future__ import annotations

import io

import pytest

from catalog.infra.storage import LocalImageStore, allowed_image


@pytest.mark.parametrize("name", ["a.png", "b.JPG", "c.jpeg", "d.gif", "e.webp"])
def test_allowed_extensions(name):
    assert allowed_image(name)


@pytest.mark.parametrize("name", ["noext", "x.svg", "x.png.exe"])
def test_rejected_extensions(name):
    assert not allowed_image(name)


def test_save_sanitizes_name(tmp_path):
    store = LocalImageStore(directory=str(tmp_path / "covers"))

    path = store.save(key="k1", filename="../../etc/cover art.png", stream=io.BytesIO(b"data"))

    assert path == "/images/k1_etc_cover_art.png"
    assert (tmp_path / "covers" / "k1_etc_cover_art.png").read_bytes() == b"data"


def test_save_rejects_bad_type(tmp_path):
    store = LocalImageStore(directory=str(tmp_path))
    with pytest.raises(ValueError):
        store.save(key="k", filename="evil.sh", stream=io.BytesIO(b""))


def test_delete_is_idempotent(tmp_path):
    store = LocalImageStore(directory=str(tmp_path))
    path = store.save(key="k", filename="a.gif", stream=io.BytesIO(b"GIF"))
    store.delete(path)
    store.delete(path)
    store.delete("")
    assert list(tmp_path.iterdir()) == []
