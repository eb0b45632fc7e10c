"""
Lightweight DDS header parser.

Works on in-memory texture blobs (KN5 entries, override files) and only reads
the header (first 148 bytes) for width, height and format.

Supported formats:
- Legacy FourCC: DXT1/DXT3/DXT5, ATI1/ATI2, BC4U/BC4S/BC5U
- DX10 extended header: common DXGI formats
- Uncompressed: BGRA, BGRX, BGR, 16-bit packed, luminance
"""

import struct
from typing import Optional, Tuple


DDS_MAGIC = b'DDS '

# FourCC codes for pixel formats
FOURCC_DXT1 = 0x31545844  # 'DXT1'
FOURCC_DXT3 = 0x33545844  # 'DXT3'
FOURCC_DXT5 = 0x35545844  # 'DXT5'
FOURCC_DX10 = 0x30315844  # 'DX10'
FOURCC_BC4U = 0x55344342  # 'BC4U'
FOURCC_BC4S = 0x53344342  # 'BC4S'
FOURCC_BC5U = 0x55354342  # 'BC5U'
FOURCC_ATI1 = 0x31495441  # 'ATI1'
FOURCC_ATI2 = 0x32495441  # 'ATI2'

FOURCC_FORMATS = {
    FOURCC_DXT1: 'BC1_UNORM',
    FOURCC_DXT3: 'BC2_UNORM',
    FOURCC_DXT5: 'BC3_UNORM',
    FOURCC_ATI1: 'BC4_UNORM',
    FOURCC_BC4U: 'BC4_UNORM',
    FOURCC_BC4S: 'BC4_SNORM',
    FOURCC_ATI2: 'BC5_UNORM',
    FOURCC_BC5U: 'BC5_UNORM',
}

# Pixel format flags
DDPF_ALPHAPIXELS = 0x000001
DDPF_ALPHA = 0x000002
DDPF_FOURCC = 0x000004
DDPF_RGB = 0x000040
DDPF_LUMINANCE = 0x020000

# DXGI format codes that can show up in textures we write or read
DXGI_FORMAT_NAMES = {
    28: 'R8G8B8A8_UNORM',
    29: 'R8G8B8A8_UNORM_SRGB',
    49: 'R8G8_UNORM',
    61: 'R8_UNORM',
    65: 'A8_UNORM',
    71: 'BC1_UNORM',
    72: 'BC1_UNORM_SRGB',
    74: 'BC2_UNORM',
    77: 'BC3_UNORM',
    78: 'BC3_UNORM_SRGB',
    80: 'BC4_UNORM',
    83: 'BC5_UNORM',
    85: 'B5G6R5_UNORM',
    86: 'B5G5R5A1_UNORM',
    87: 'B8G8R8A8_UNORM',
    88: 'B8G8R8X8_UNORM',
    98: 'BC7_UNORM',
    99: 'BC7_UNORM_SRGB',
    115: 'B4G4R4A4_UNORM',
}

# Header layout (offsets from the start of the file)
HEADER_SIZE = 128
DX10_HEADER_SIZE = 148
PIXEL_FORMAT_OFFSET = 76


def is_dds(data: bytes) -> bool:
    """Check if a texture blob is a DDS container"""
    return len(data) > 3 and data[:3] == b'DDS'


def parse_dds_header(data: bytes) -> Tuple[Optional[Tuple[int, int]], str]:
    """
    Parse DDS header to extract dimensions and format.

    Returns:
        ((width, height), format_string) or (None, "UNKNOWN") if not a DDS header

    Format strings use DXGI names:
        - BC1_UNORM (DXT1)
        - BC3_UNORM (DXT5)
        - B8G8R8A8_UNORM (BGRA)
        - B8G8R8X8_UNORM (BGR)
    """
    if len(data) < HEADER_SIZE or data[:4] != DDS_MAGIC:
        return None, "UNKNOWN"

    height, width = struct.unpack_from('<II', data, 12)

    pf = PIXEL_FORMAT_OFFSET
    pf_flags, pf_fourcc, pf_rgb_bitcount = struct.unpack_from('<III', data, pf + 4)
    pf_a_mask = struct.unpack_from('<I', data, pf + 28)[0]

    format_str = "UNKNOWN"

    if pf_flags & DDPF_FOURCC and pf_fourcc == FOURCC_DX10:
        if len(data) >= DX10_HEADER_SIZE:
            dxgi_format = struct.unpack_from('<I', data, HEADER_SIZE)[0]
            format_str = DXGI_FORMAT_NAMES.get(dxgi_format, f'DXGI_{dxgi_format}')

    elif pf_flags & DDPF_FOURCC:
        format_str = FOURCC_FORMATS.get(pf_fourcc)
        if format_str is None:
            fourcc_str = pf_fourcc.to_bytes(4, 'little').decode('ascii', errors='replace')
            if all(c.isprintable() for c in fourcc_str):
                format_str = f'FOURCC_{fourcc_str}'
            else:
                format_str = f'FOURCC_{pf_fourcc:08X}'

    elif pf_flags & DDPF_RGB:
        if pf_rgb_bitcount == 32:
            format_str = 'B8G8R8A8_UNORM' if pf_a_mask else 'B8G8R8X8_UNORM'
        elif pf_rgb_bitcount == 24:
            format_str = 'B8G8R8_UNORM'
        elif pf_rgb_bitcount == 16:
            format_str = 'B4G4R4A4_UNORM' if pf_a_mask else 'B5G6R5_UNORM'

    elif pf_flags & DDPF_LUMINANCE:
        format_str = 'L8A8' if pf_flags & DDPF_ALPHAPIXELS else 'L8'

    return (width, height), format_str
