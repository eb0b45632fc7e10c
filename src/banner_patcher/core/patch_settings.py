"""Run-wide settings and texture rules"""

from dataclasses import dataclass
from typing import Optional

from .formats import CompressFormat


@dataclass(frozen=True)
class PatchSettings:
    """Configuration for a patching run - built once, passed down the pipeline"""

    # Alpha handling
    preserve_gradients: bool = True
    gradient_threshold: float = 0.4

    # Compression settings
    dxt1_mode: bool = False
    mipmaps: bool = True
    production_quality: bool = False

    # Packaging
    pack_as_mod: bool = True

    def __post_init__(self):
        if not 0.0 <= self.gradient_threshold <= 1.0:
            raise ValueError(f"Gradient threshold must be within [0, 1], got {self.gradient_threshold}")

    @property
    def alpha_threshold(self) -> float:
        """Fraction of full opacity below which alpha counts as real transparency"""
        return self.gradient_threshold if self.preserve_gradients else 0.0

    @property
    def default_format(self) -> CompressFormat:
        return CompressFormat.DXT1 if self.dxt1_mode else CompressFormat.RGB

    @classmethod
    def from_args(cls, args) -> "PatchSettings":
        """Build settings from a parsed argparse namespace"""
        return cls(
            preserve_gradients=args.gradients,
            gradient_threshold=args.gradient_threshold,
            dxt1_mode=args.dxt1,
            mipmaps=args.mipmaps,
            production_quality=args.production_quality,
            pack_as_mod=args.mod,
        )


@dataclass(frozen=True)
class TextureRule:
    """A skin texture to fix, as listed in a rules file"""
    texture_name: str
    preferred_format: Optional[CompressFormat] = None
