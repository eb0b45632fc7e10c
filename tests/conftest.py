"""Shared fixtures: synthetic textures, DDS blobs, car folders and a fake texconv"""

import io
import struct
from pathlib import Path
from typing import Dict, Optional

import numpy as np
import pytest
from PIL import Image

from banner_patcher.core import PatchSettings, TransparencyFixer, write_kn5_textures


def rgba(alpha, rgb=(10, 20, 30)) -> np.ndarray:
    """RGBA image with the given alpha rows and a constant colour"""
    alpha = np.asarray(alpha, dtype=np.uint8)
    if alpha.ndim == 1:
        alpha = alpha[np.newaxis, :]
    pixels = np.empty(alpha.shape + (4,), dtype=np.uint8)
    pixels[..., :3] = rgb
    pixels[..., 3] = alpha
    return pixels


def png_bytes(pixels: np.ndarray) -> bytes:
    output = io.BytesIO()
    Image.fromarray(pixels).save(output, format="PNG")
    return output.getvalue()


def dds_bytes(pixels: np.ndarray) -> bytes:
    """Uncompressed 32-bit BGRA DDS"""
    height, width = pixels.shape[:2]
    header = struct.pack(
        '<4s7I44x8I5I',
        b'DDS ',
        124,                     # dwSize
        0x1 | 0x2 | 0x4 | 0x1000 | 0x8,  # CAPS | HEIGHT | WIDTH | PIXELFORMAT | PITCH
        height,
        width,
        width * 4,               # pitch
        0,                       # depth
        1,                       # mipmap count
        32,                      # pixel format size
        0x40 | 0x1,              # DDPF_RGB | DDPF_ALPHAPIXELS
        0,                       # fourcc
        32,                      # bit count
        0x00FF0000, 0x0000FF00, 0x000000FF, 0xFF000000,
        0x1000, 0, 0, 0, 0,      # caps, caps2-4, reserved
    )
    bgra = pixels[..., [2, 1, 0, 3]].astype(np.uint8).tobytes()
    return header + bgra


class FakeCompressor:
    """Stands in for texconv; remembers what it was asked to encode"""

    def __init__(self):
        self.calls = []

    def compress(self, pixels: np.ndarray, fmt) -> bytes:
        self.calls.append((pixels, fmt))
        return b"DDS fake " + fmt.name.encode()


@pytest.fixture
def fake_compressor() -> FakeCompressor:
    return FakeCompressor()


@pytest.fixture
def fixer(fake_compressor) -> TransparencyFixer:
    return TransparencyFixer(PatchSettings(), fake_compressor)


@pytest.fixture
def opaque_png() -> bytes:
    return png_bytes(rgba([[255, 255], [255, 255]]))


@pytest.fixture
def faded_png() -> bytes:
    """Slightly transparent only: gets flattened"""
    return png_bytes(rgba([[255, 200], [230, 255]]))


@pytest.fixture
def banner_png() -> bytes:
    """Really transparent in places: gets stretched"""
    return png_bytes(rgba([[0, 50], [200, 255]]))


@pytest.fixture
def cars_dir(tmp_path) -> Path:
    path = tmp_path / "content" / "cars"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def make_car(cars_dir):
    """
    Build a car folder.

    Args:
        car_id: Folder name
        kn5_textures: Textures for <car_id>.kn5; None for no KN5 at all
        skins: Skin name -> override files; None for no skins directory
        kn5_bytes: Raw KN5 content instead of kn5_textures
    """
    def _make_car(car_id: str, kn5_textures: Optional[Dict[str, bytes]] = None,
                  skins: Optional[Dict[str, Dict[str, bytes]]] = None,
                  kn5_bytes: Optional[bytes] = None) -> Path:
        car_dir = cars_dir / car_id
        car_dir.mkdir()

        if kn5_bytes is not None:
            (car_dir / f"{car_id}.kn5").write_bytes(kn5_bytes)
        elif kn5_textures is not None:
            write_kn5_textures(car_dir / f"{car_id}.kn5", kn5_textures)

        if skins is not None:
            skins_dir = car_dir / "skins"
            skins_dir.mkdir()
            for skin, files in skins.items():
                (skins_dir / skin).mkdir()
                for name, data in files.items():
                    (skins_dir / skin / name).write_bytes(data)
        return car_dir

    return _make_car
