"""Tests for the raw program image loader."""

from __future__ import annotations

import io

import pytest

from pychip8.loader import RomFormatError, load_program_image, load_program_image_from_path


def test_load_from_stream() -> None:
    image = load_program_image(io.BytesIO(b"\x60\x05\x12\x00"), "demo")

    assert image.name == "demo"
    assert image.data == b"\x60\x05\x12\x00"
    assert image.size == 4
    assert image.load_address == 0x200
    assert image.end_address == 0x203


def test_load_from_path(tmp_path) -> None:
    path = tmp_path / "pong.ch8"
    path.write_bytes(bytes(range(10)))

    image = load_program_image_from_path(path)

    assert image.name == "pong.ch8"
    assert image.data == bytes(range(10))


def test_largest_image_accepted() -> None:
    image = load_program_image(io.BytesIO(bytes(3584)))
    assert image.size == 3584


def test_oversize_image_rejected() -> None:
    with pytest.raises(RomFormatError):
        load_program_image(io.BytesIO(bytes(3585)))


def test_empty_image_rejected() -> None:
    with pytest.raises(RomFormatError):
        load_program_image(io.BytesIO(b""))


def test_missing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_program_image_from_path(tmp_path / "missing.ch8")
