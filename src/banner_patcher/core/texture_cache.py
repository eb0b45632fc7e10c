"""Per-car lazy KN5 access and memoized texture fixes"""

from pathlib import Path
from typing import Callable, Dict, Optional

from .errors import TextureNotFoundError
from .formats import CompressFormat
from .kn5 import read_kn5_textures
from .patch_settings import TextureRule


TextureTransform = Callable[[bytes, Optional[CompressFormat], str], Optional[bytes]]


class LazyKn5:
    """
    Handle on a car's main KN5 that is read on first access only.

    Cars whose rules are all satisfied by per-skin override files never
    touch the KN5 at all.
    """

    def __init__(self, path: Path, opener: Callable[[Path], Dict[str, bytes]] = read_kn5_textures):
        self.path = path
        self._opener = opener
        self._textures: Optional[Dict[str, bytes]] = None

    @property
    def is_open(self) -> bool:
        return self._textures is not None

    def open(self) -> Dict[str, bytes]:
        if self._textures is None:
            self._textures = self._opener(self.path)
        return self._textures

    def get_texture(self, name: str) -> bytes:
        """
        Raises:
            TextureNotFoundError: If the KN5 has no texture with this name
        """
        textures = self.open()
        try:
            return textures[name]
        except KeyError:
            raise TextureNotFoundError(f"{name} not found in {self.path.name}") from None


class ContainerTextureCache:
    """
    Fix results for KN5 textures, keyed by texture name.

    A stored None means "checked, no change needed" and is not recomputed;
    names that were never requested are simply absent.
    """

    def __init__(self, container: LazyKn5, transform: TextureTransform):
        self.container = container
        self._transform = transform
        self._results: Dict[str, Optional[bytes]] = {}

    def __contains__(self, texture_name: str) -> bool:
        return texture_name in self._results

    def __len__(self) -> int:
        return len(self._results)

    def get(self, rule: TextureRule) -> Optional[bytes]:
        """Get the fixed texture, computing it from the original KN5 bytes once"""
        name = rule.texture_name
        if name not in self._results:
            original = self.container.get_texture(name)
            self._results[name] = self._transform(original, rule.preferred_format, name)
        return self._results[name]
