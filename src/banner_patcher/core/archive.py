"""Patch archive writing"""

import zipfile
from pathlib import Path
from typing import List, Optional

from .utils import ensure_file_name_valid, word_wrap


MOD_NAME = "Transparency Banner Patch"
MOD_DESCRIPTION_ENTRY = "Description.jsgme"

# ZIP end-of-central-directory comment: 16-bit length, legacy code page
COMMENT_ENCODING = "cp1252"
COMMENT_MAX_LENGTH = 0xFFFF

DESCRIPTION_WIDTH = 120
COMMENT_WIDTH = 80


def build_mod_prefix(car_names: List[str]) -> str:
    """JSGME mod folder: named after the car if there's only one"""
    if len(car_names) == 1:
        return f"MODS/{MOD_NAME} For {ensure_file_name_valid(car_names[0])}"
    return f"MODS/{MOD_NAME}"


def encode_comment(text: str) -> bytes:
    encoded = word_wrap(text, COMMENT_WIDTH).encode(COMMENT_ENCODING, errors='replace')
    return encoded[:COMMENT_MAX_LENGTH]


class PatchArchive:
    """
    ZIP patch with skin textures laid out like the AC content folder.

    Entries go to [mod_prefix/]content/cars/{car}/skins/{skin}/{texture}.
    """

    def __init__(self, path: Path, mod_prefix: str = "", comment: Optional[str] = None):
        self.path = Path(path)
        self.mod_prefix = mod_prefix.strip("/")
        self.comment = comment
        self.entries: List[str] = []
        self._zip: Optional[zipfile.ZipFile] = None

    def __enter__(self) -> "PatchArchive":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def open(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._zip = zipfile.ZipFile(self.path, 'w', compression=zipfile.ZIP_DEFLATED, compresslevel=9)

    def close(self):
        if self._zip is None:
            return
        if self.comment:
            self._zip.comment = encode_comment(self.comment)
        self._zip.close()
        self._zip = None

    def _entry_name(self, *parts: str) -> str:
        return "/".join(p for p in (self.mod_prefix, *parts) if p)

    def texture_entry_name(self, car_id: str, skin_id: str, texture_name: str) -> str:
        return self._entry_name("content", "cars", car_id, "skins", skin_id, texture_name)

    def _write(self, name: str, data: bytes):
        if self._zip is None:
            raise ValueError(f"Archive {self.path} is not open")
        self._zip.writestr(name, data)
        self.entries.append(name)

    def write_texture(self, car_id: str, skin_id: str, texture_name: str, data: bytes) -> str:
        name = self.texture_entry_name(car_id, skin_id, texture_name)
        self._write(name, data)
        return name

    def write_mod_description(self, description: str) -> str:
        name = self._entry_name(MOD_DESCRIPTION_ENTRY)
        self._write(name, word_wrap(description, DESCRIPTION_WIDTH).encode('utf-8'))
        return name
