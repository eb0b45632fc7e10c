"""
Minimal KN5 reader - only the texture table.

KN5 layout (little-endian), up to the end of the texture table:
- magic 'sc6969' (6 bytes)
- int32 version; versions above 5 carry one extra int32
- int32 texture count, then per texture:
  - int32 type (1 for active textures)
  - int32 name length + UTF-8 name
  - uint32 data size + raw texture file (DDS or PNG)

Materials and the node tree follow the textures and are never read.
"""

import struct
from pathlib import Path
from typing import BinaryIO, Dict

from .errors import Kn5FormatError


KN5_MAGIC = b'sc6969'
KN5_VERSION = 6


def _read_exact(f: BinaryIO, size: int) -> bytes:
    data = f.read(size)
    if len(data) != size:
        raise Kn5FormatError(f"Unexpected end of file at offset {f.tell()}")
    return data


def _read_int32(f: BinaryIO) -> int:
    return struct.unpack('<i', _read_exact(f, 4))[0]


def _read_uint32(f: BinaryIO) -> int:
    return struct.unpack('<I', _read_exact(f, 4))[0]


def _read_string(f: BinaryIO) -> str:
    length = _read_int32(f)
    if length < 0:
        raise Kn5FormatError(f"Invalid string length {length}")
    return _read_exact(f, length).decode('utf-8')


def read_kn5_textures(path: Path) -> Dict[str, bytes]:
    """
    Read all embedded textures from a KN5 file.

    Returns:
        Texture name -> raw texture file bytes, in file order

    Raises:
        Kn5FormatError: If the file isn't a KN5 or is truncated
    """
    with open(path, 'rb') as f:
        magic = f.read(len(KN5_MAGIC))
        if magic != KN5_MAGIC:
            raise Kn5FormatError(f"Not a KN5 file: {path}")

        version = _read_int32(f)
        if version > 5:
            _read_int32(f)  # Unknown extra header field

        count = _read_int32(f)
        if count < 0:
            raise Kn5FormatError(f"Invalid texture count {count}")

        textures = {}
        for _ in range(count):
            _read_int32(f)  # Texture type
            name = _read_string(f)
            size = _read_uint32(f)
            textures[name] = _read_exact(f, size)

    return textures


def write_kn5_textures(path: Path, textures: Dict[str, bytes], version: int = KN5_VERSION):
    """Write a KN5 containing only a texture table (plus empty materials and no nodes)"""
    with open(path, 'wb') as f:
        f.write(KN5_MAGIC)
        f.write(struct.pack('<i', version))
        if version > 5:
            f.write(struct.pack('<i', 0))

        f.write(struct.pack('<i', len(textures)))
        for name, data in textures.items():
            encoded = name.encode('utf-8')
            f.write(struct.pack('<i', 1))
            f.write(struct.pack('<i', len(encoded)))
            f.write(encoded)
            f.write(struct.pack('<I', len(data)))
            f.write(data)

        f.write(struct.pack('<i', 0))  # Materials
