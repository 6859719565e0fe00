from __future__ import annotations

from typing import Sequence

import pytest
from PIL import Image


@pytest.fixture
def make_image(tmp_path):
    def _make(name: str, size, pixels: Sequence, mode: str = "RGB") -> str:
        img = Image.new(mode, size)
        img.putdata(list(pixels))
        path = tmp_path / name
        img.save(path)
        return str(path)

    return _make
