"""
Alpha channel analysis and transformation.

A banner texture ends up in one of three states:
- KEEP: fully opaque already, nothing to write
- FLATTEN: only slightly transparent (no alpha below the threshold);
  alpha is dropped and the texture becomes opaque RGB
- STRETCH: really transparent somewhere; alpha is divided by the threshold
  so the fade survives while the near-opaque parts become fully opaque

All functions take (height, width, channels) uint8 arrays and return new
arrays; inputs are never modified.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np


class AlphaDecision(Enum):
    KEEP = "keep"
    FLATTEN = "flatten"
    STRETCH = "stretch"


@dataclass(frozen=True)
class AlphaFixResult:
    """Transformed pixels and whether they need an alpha-capable output format"""
    pixels: np.ndarray
    preserve_gradient: bool


def alpha_cutoff(threshold: float) -> float:
    """Alpha value (0-255 scale) below which a pixel is considered transparent"""
    return threshold * 255


def classify_alpha(alpha: np.ndarray, threshold: float) -> AlphaDecision:
    """
    Decide what to do with an alpha channel.

    The sub-threshold check wins: a texture only enters gradient handling if
    some pixel is actually below threshold * 255. Textures that are merely
    non-opaque get flattened instead.
    """
    if np.any(alpha < alpha_cutoff(threshold)):
        return AlphaDecision.STRETCH
    if np.any(alpha != 255):
        return AlphaDecision.FLATTEN
    return AlphaDecision.KEEP


def flatten_alpha(pixels: np.ndarray) -> np.ndarray:
    """Drop the alpha channel, RGB passes through unchanged"""
    return np.array(pixels[..., :3], dtype=np.uint8, copy=True)


def stretch_alpha(pixels: np.ndarray, threshold: float) -> np.ndarray:
    """
    Rescale alpha by 1 / threshold, clamped to 0-255 and truncated to a byte.

    Example with threshold 0.4: alpha 50 -> 125, 51 -> 127, 102 and above -> 255.
    """
    alpha = pixels[..., 3].astype(np.float64)
    stretched = np.trunc(np.clip(alpha / threshold, 0, 255)).astype(np.uint8)

    result = np.array(pixels, dtype=np.uint8, copy=True)
    result[..., 3] = stretched
    return result


def normalize_transparency(pixels: np.ndarray, threshold: float) -> Optional[AlphaFixResult]:
    """
    Classify an RGBA image and build its fixed copy.

    Args:
        pixels: (height, width, 4) uint8 RGBA array
        threshold: Gradient threshold in [0, 1]; 0 disables gradient handling

    Returns:
        None if no change is needed, otherwise the fixed pixels with a flag
        telling whether they keep a (stretched) alpha channel
    """
    if pixels.ndim != 3 or pixels.shape[2] != 4:
        # Nothing to remove
        return None

    decision = classify_alpha(pixels[..., 3], threshold)

    if decision is AlphaDecision.KEEP:
        return None

    if decision is AlphaDecision.FLATTEN:
        return AlphaFixResult(flatten_alpha(pixels), preserve_gradient=False)

    stretched = stretch_alpha(pixels, threshold)
    # Cut-out alpha (only 0 and 255) stretches to itself
    if np.array_equal(stretched[..., 3], pixels[..., 3]):
        return None
    return AlphaFixResult(stretched, preserve_gradient=True)
