"""Output texture formats, rule-file tokens and the alpha upgrade table"""

from enum import Enum
from typing import Optional

from .errors import FormatResolutionError


class CompressFormat(Enum):
    DXT1 = "DXT1"
    DXT5 = "DXT5"
    LUMINANCE = "Luminance"
    LUMINANCE_ALPHA = "LuminanceAlpha"
    RGB565 = "RGB565"
    RGBA4444 = "RGBA4444"
    RGBA = "RGBA"
    RGB = "RGB"

    @property
    def is_block_compressed(self) -> bool:
        return self in (CompressFormat.DXT1, CompressFormat.DXT5)

    @property
    def has_alpha(self) -> bool:
        return self in ALPHA_FORMATS


# Rule-file vocabulary (case-insensitive)
FORMAT_TOKENS = {
    "dxt1": CompressFormat.DXT1,

    "dxt": CompressFormat.DXT5,
    "dxt5": CompressFormat.DXT5,

    "l": CompressFormat.LUMINANCE,
    "lum": CompressFormat.LUMINANCE,
    "luminance": CompressFormat.LUMINANCE,

    "la": CompressFormat.LUMINANCE_ALPHA,
    "lumalpha": CompressFormat.LUMINANCE_ALPHA,
    "luminancealpha": CompressFormat.LUMINANCE_ALPHA,

    "rgb565": CompressFormat.RGB565,
    "rgb5650": CompressFormat.RGB565,
    "565": CompressFormat.RGB565,
    "5650": CompressFormat.RGB565,

    "rgba4444": CompressFormat.RGBA4444,
    "4444": CompressFormat.RGBA4444,

    "rgba": CompressFormat.RGBA,
    "rgba8888": CompressFormat.RGBA,
    "8888": CompressFormat.RGBA,

    "rgb": CompressFormat.RGB,
    "rgb888": CompressFormat.RGB,
    "rgba8880": CompressFormat.RGB,
    "888": CompressFormat.RGB,
    "8880": CompressFormat.RGB,
}

ALPHA_FORMATS = frozenset({
    CompressFormat.DXT5,
    CompressFormat.LUMINANCE_ALPHA,
    CompressFormat.RGBA4444,
    CompressFormat.RGBA,
})

# Opaque format -> its alpha-capable sibling
ALPHA_SIBLINGS = {
    CompressFormat.RGB: CompressFormat.RGBA,
    CompressFormat.LUMINANCE: CompressFormat.LUMINANCE_ALPHA,
    CompressFormat.RGB565: CompressFormat.RGBA4444,
    CompressFormat.DXT1: CompressFormat.DXT5,
}

# texconv -f names; -dx9 makes texconv write the legacy DDS headers AC reads
TEXCONV_FORMAT_MAP = {
    CompressFormat.DXT1: "BC1_UNORM",
    CompressFormat.DXT5: "BC3_UNORM",
    CompressFormat.LUMINANCE: "R8_UNORM",
    CompressFormat.LUMINANCE_ALPHA: "R8G8_UNORM",
    CompressFormat.RGB565: "B5G6R5_UNORM",
    CompressFormat.RGBA4444: "B4G4R4A4_UNORM",
    CompressFormat.RGBA: "B8G8R8A8_UNORM",
    CompressFormat.RGB: "B8G8R8X8_UNORM",
}


def parse_format(token: Optional[str]) -> Optional[CompressFormat]:
    """
    Parse a preferred-format token from a rule line.

    Unknown or missing tokens mean "use the global default" and return None.
    """
    if token is None:
        return None
    return FORMAT_TOKENS.get(token.strip().lower())


def resolve_format(fmt: CompressFormat, preserve_gradient: bool) -> CompressFormat:
    """
    Get the format a texture should actually be encoded to.

    Args:
        fmt: Nominal format (rule preference or global default)
        preserve_gradient: Whether the fixed texture keeps a stretched alpha channel

    Returns:
        fmt itself if no alpha is needed or it already stores alpha,
        otherwise its alpha-capable sibling

    Raises:
        FormatResolutionError: If fmt has no alpha-capable sibling
    """
    if not preserve_gradient or fmt in ALPHA_FORMATS:
        return fmt
    try:
        return ALPHA_SIBLINGS[fmt]
    except KeyError:
        raise FormatResolutionError(f"No alpha-capable format defined for {fmt!r}") from None
