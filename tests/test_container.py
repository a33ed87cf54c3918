from __future__ import annotations
import copy
import os

import pytest

from rbcodec.container import InMemory, OnDisk, read_basket, resolve
from rbcodec.errors import BasketIOError, ContainerConsumed, MalformedHeader
from rootfixtures import build_basket, write_at

# 16 payload bytes = 4 big-endian int32 entries
INTS = b"".join(i.to_bytes(4, "big") for i in (1, 2, 3, 4))


def _simple_basket() -> bytes:
    blob = build_basket(INTS, 4, title="test_tree_01")
    assert len(blob) == 86
    return blob


def test_on_disk_matches_manual_read_and_in_memory(tmp_path):
    path = write_at(tmp_path / "simple.root", 218, _simple_basket(), trailer=b"\x00" * 64)

    # the same region, read by hand
    with open(path, "rb") as f:
        f.seek(218)
        manual = f.read(86)

    disk_header, disk_data = resolve(OnDisk(path, 218, 86))
    mem_header, mem_data = resolve(InMemory(manual))
    assert disk_header == mem_header
    assert disk_data == mem_data
    assert disk_header.key_len == 70

    on_disk = read_basket(OnDisk(path, 218, 86))
    in_memory = read_basket(InMemory(path.read_bytes()[218:218 + 86]))
    assert on_disk == in_memory == (4, INTS)


def test_resolve_method_form():
    h, data = InMemory(_simple_basket()).resolve()
    assert h.name == "one"
    assert len(data) == 86 - h.encoded_len


def test_read_past_end_of_file(tmp_path):
    path = write_at(tmp_path / "short.root", 218, _simple_basket())
    with pytest.raises(BasketIOError, match="short read"):
        resolve(OnDisk(path, 218, 87))
    with pytest.raises(BasketIOError):
        resolve(OnDisk(path, 10_000, 86))


def test_missing_file_is_io_error(tmp_path):
    c = OnDisk(tmp_path / "nope.root", 0, 10)
    with pytest.raises(BasketIOError) as ei:
        resolve(c)
    assert isinstance(ei.value, OSError)
    assert isinstance(ei.value.__cause__, FileNotFoundError)


def test_on_disk_holds_no_handle(tmp_path):
    path = write_at(tmp_path / "simple.root", 218, _simple_basket())
    c = OnDisk(path, 218, 86)
    # a description only: the file may even be replaced before resolution
    os.replace(write_at(tmp_path / "other.root", 218, _simple_basket()), path)
    assert read_basket(c) == (4, INTS)


def test_resolve_is_one_shot():
    c = InMemory(_simple_basket())
    resolve(c)
    assert c.consumed and len(c) == 0
    with pytest.raises(ContainerConsumed):
        resolve(c)


def test_on_disk_resolve_is_one_shot(tmp_path):
    path = write_at(tmp_path / "simple.root", 0, _simple_basket())
    c = OnDisk(path, 0, 86)
    read_basket(c)
    with pytest.raises(ContainerConsumed):
        read_basket(c)


def test_failed_resolution_still_consumes(tmp_path):
    c = OnDisk(tmp_path / "nope.root", 0, 10)
    with pytest.raises(BasketIOError):
        resolve(c)
    with pytest.raises(ContainerConsumed):
        resolve(c)


def test_containers_cannot_be_copied(tmp_path):
    for c in (InMemory(b"abc"), OnDisk(tmp_path / "x", 0, 1)):
        with pytest.raises(TypeError):
            copy.copy(c)
        with pytest.raises(TypeError):
            copy.deepcopy(c)


def test_malformed_in_memory_block():
    with pytest.raises(MalformedHeader):
        resolve(InMemory(b"\x00" * 10))


def test_invalid_descriptors():
    with pytest.raises(ValueError):
        OnDisk("x.root", -1, 10)
    with pytest.raises(ValueError):
        OnDisk("x.root", 0, -10)
    with pytest.raises(TypeError):
        InMemory("not bytes")  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        resolve(object())  # type: ignore[arg-type]


def test_repr():
    assert repr(InMemory(b"abcd")) == "InMemory(4 bytes)"
    assert "offset=218" in repr(OnDisk("simple.root", 218, 86))
