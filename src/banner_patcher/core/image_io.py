"""Decoding texture blobs to pixel arrays and back (Pillow)"""

import io

import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import TextureDecodeError


def decode_image(data: bytes, name: str = "texture") -> np.ndarray:
    """
    Decode a DDS or bitmap blob into a read-only RGBA array.

    Args:
        data: Raw file bytes
        name: Texture name for error messages

    Returns:
        (height, width, 4) uint8 array

    Raises:
        TextureDecodeError: If Pillow can't read the data
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            rgba = image.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError, SyntaxError) as e:
        raise TextureDecodeError(f"Failed to decode {name}: {e}") from e

    pixels = np.array(rgba, dtype=np.uint8)
    pixels.setflags(write=False)
    return pixels


def encode_png(pixels: np.ndarray) -> bytes:
    """Encode an (h, w, 3) or (h, w, 4) uint8 array as PNG"""
    output = io.BytesIO()
    Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8)).save(output, format="PNG")
    return output.getvalue()
