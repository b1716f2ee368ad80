"""Shared fixtures: the reference image in all four width / byte-order layouts."""

from __future__ import annotations

import pytest

from elf_factory import ElfFactory, build_sample
from elfscope import ElfImage

LAYOUTS = [(32, "little"), (32, "big"), (64, "little"), (64, "big")]


@pytest.fixture(params=LAYOUTS, ids=lambda p: f"elf{p[0]}-{p[1]}")
def layout(request) -> tuple[int, str]:
    return request.param


@pytest.fixture
def factory(layout) -> ElfFactory:
    return ElfFactory(*layout)


@pytest.fixture
def sample_bytes(layout) -> bytes:
    return build_sample(*layout)


@pytest.fixture
def sample_image(sample_bytes):
    image = ElfImage.from_bytes(sample_bytes)
    yield image
    image.close()


@pytest.fixture
def sample_file(tmp_path, sample_bytes):
    path = tmp_path / "sample.o"
    path.write_bytes(sample_bytes)
    return path
