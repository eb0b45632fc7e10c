"""
DDS recompression through Microsoft's texconv.

texconv works on files, so every call writes the fixed pixels to a temporary
PNG and reads back the produced DDS.
"""

import os
import shutil
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np

from .dds_parser import parse_dds_header
from .errors import CompressorError
from .formats import CompressFormat, TEXCONV_FORMAT_MAP
from .image_io import encode_png


# Stands in for the Mitchell filter used when rounding DXT sizes
RESIZE_FILTER = "CUBIC"

TEXCONV_TIMEOUT = 300


def find_texconv(explicit: Optional[str] = None) -> Optional[str]:
    """
    Locate texconv.

    Handles both frozen (PyInstaller) and script execution modes. Looks at,
    in order: the explicit path, the TEXCONV environment variable, a tools/
    directory next to the executable or project, and PATH.

    Returns:
        Path to texconv, or None if it can't be found
    """
    if explicit:
        return explicit

    from_env = os.environ.get("TEXCONV")
    if from_env:
        return from_env

    if hasattr(sys, 'frozen'):
        # PyInstaller frozen executable
        script_dir = Path(sys.executable).parent
    else:
        # This file is at: src/banner_patcher/core/compressor.py
        script_dir = Path(__file__).parent.parent.parent.parent

    bundled = script_dir / "tools" / "texconv.exe"
    if bundled.exists():
        return str(bundled)

    return shutil.which("texconv") or shutil.which("texconv.exe")


def round_to_multiple_of_four(size: int) -> int:
    """Nearest multiple of four, never below four (DXT block size)"""
    return max(4, (size + 2) // 4 * 4)


def block_compatible_dimensions(width: int, height: int) -> Tuple[int, int]:
    return round_to_multiple_of_four(width), round_to_multiple_of_four(height)


class TextureCompressor:
    """Encodes RGB/RGBA pixels into DDS with texconv"""

    def __init__(self, texconv_path: Optional[str], mipmaps: bool = True,
                 production_quality: bool = False, timeout: int = TEXCONV_TIMEOUT):
        """
        Args:
            texconv_path: Path to texconv executable (None if not found)
            mipmaps: Generate a full mip chain
            production_quality: Use dithered block compression
            timeout: Seconds before a texconv call is abandoned
        """
        self.texconv_path = texconv_path
        self.mipmaps = mipmaps
        self.production_quality = production_quality
        self.timeout = timeout

    def build_command(self, input_path: Path, output_dir: Path, fmt: CompressFormat,
                      width: int, height: int) -> List[str]:
        """Build the texconv command line for one texture"""
        cmd = [
            str(self.texconv_path),
            "-nologo",
            "-y",  # Overwrite
            "-dx9",  # Legacy headers
            "-l",  # Lower-case output extension
            "-f", TEXCONV_FORMAT_MAP[fmt],
            "-m", "0" if self.mipmaps else "1",
        ]

        if fmt.is_block_compressed:
            new_width, new_height = block_compatible_dimensions(width, height)
            if (new_width, new_height) != (width, height):
                cmd.extend(["-w", str(new_width), "-h", str(new_height), "-if", RESIZE_FILTER])
            if self.production_quality:
                cmd.extend(["-bc", "d"])

        if fmt is CompressFormat.LUMINANCE_ALPHA:
            # R8G8 is written as A8L8: luminance from red, alpha into green
            cmd.extend(["-swizzle", "ra"])

        cmd.extend(["-o", str(output_dir), str(input_path)])
        return cmd

    def compress(self, pixels: np.ndarray, fmt: CompressFormat) -> bytes:
        """
        Encode pixels to a DDS blob.

        Raises:
            CompressorError: If texconv is missing, fails, or produces nothing
        """
        if not self.texconv_path:
            raise CompressorError("texconv not found; use --texconv or put it on PATH")

        height, width = pixels.shape[:2]

        with tempfile.TemporaryDirectory(prefix="banner_patcher_") as tmp:
            tmp_dir = Path(tmp)
            input_path = tmp_dir / "texture.png"
            output_dir = tmp_dir / "out"
            output_dir.mkdir()
            input_path.write_bytes(encode_png(pixels))

            cmd = self.build_command(input_path, output_dir, fmt, width, height)
            try:
                result = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout)
            except FileNotFoundError as e:
                raise CompressorError(f"texconv not found at {self.texconv_path}") from e
            except subprocess.TimeoutExpired as e:
                raise CompressorError(f"texconv timed out after {self.timeout}s") from e

            if result.returncode != 0:
                error_msg = result.stderr or result.stdout or "Unknown error"
                raise CompressorError(f"texconv failed (exit {result.returncode}): {error_msg.strip()}")

            # texconv keeps the input stem
            output_path = output_dir / input_path.with_suffix(".dds").name
            if not output_path.exists():
                raise CompressorError(f"Output file not created: {output_path.name}")
            data = output_path.read_bytes()

        dims, _ = parse_dds_header(data)
        if dims is None:
            raise CompressorError("texconv produced an invalid DDS file")
        return data
