"""Removing transparency from a single texture blob"""

from typing import Optional

from .alpha import normalize_transparency
from .compressor import TextureCompressor
from .dds_parser import is_dds
from .formats import CompressFormat, resolve_format
from .image_io import decode_image, encode_png
from .patch_settings import PatchSettings


class TransparencyFixer:
    """
    Turns a texture blob into its opaque (or alpha-stretched) replacement.

    DDS textures are recompressed with the compressor; anything else (PNG,
    JPEG and other override bitmaps) comes back as PNG.
    """

    def __init__(self, settings: PatchSettings, compressor: TextureCompressor):
        self.settings = settings
        self.compressor = compressor

    def fix(self, data: bytes, preferred_format: Optional[CompressFormat] = None,
            name: str = "texture") -> Optional[bytes]:
        """
        Fix a texture.

        Args:
            data: Original texture bytes (never modified)
            preferred_format: Output format from the rule, None for the default
            name: Texture name for error messages

        Returns:
            Replacement bytes, or None if the texture needs no change

        Raises:
            TextureDecodeError: If the data can't be decoded
            CompressorError: If DDS recompression fails
        """
        if is_dds(data):
            return self._fix_dds(data, preferred_format, name)
        return self._fix_bitmap(data, name)

    def _fix_dds(self, data: bytes, preferred_format: Optional[CompressFormat], name: str) -> Optional[bytes]:
        result = normalize_transparency(decode_image(data, name), self.settings.alpha_threshold)
        if result is None:
            return None

        fmt = resolve_format(preferred_format or self.settings.default_format, result.preserve_gradient)
        return self.compressor.compress(result.pixels, fmt)

    def _fix_bitmap(self, data: bytes, name: str) -> Optional[bytes]:
        result = normalize_transparency(decode_image(data, name), self.settings.alpha_threshold)
        if result is None:
            return None
        return encode_png(result.pixels)
