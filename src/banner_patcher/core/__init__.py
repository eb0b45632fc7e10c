"""Core processing functionality for the transparency banner patcher"""

from .alpha import AlphaDecision, AlphaFixResult, classify_alpha, flatten_alpha, stretch_alpha, \
    normalize_transparency
from .archive import PatchArchive, build_mod_prefix, encode_comment
from .ac_root import find_ac_root, get_cars_directory
from .car_data import find_main_kn5, get_car_name
from .compressor import TextureCompressor, find_texconv
from .dds_parser import is_dds, parse_dds_header
from .errors import (
    ConfigurationError,
    FormatResolutionError,
    TextureProcessingError,
    TextureDecodeError,
    CompressorError,
    Kn5FormatError,
    TextureNotFoundError,
    CarSkippedError,
    MissingKn5Error,
    MissingSkinsError,
)
from .formats import CompressFormat, parse_format, resolve_format
from .image_io import decode_image, encode_png
from .kn5 import read_kn5_textures, write_kn5_textures
from .patch_settings import PatchSettings, TextureRule
from .patcher import BannerPatcher, CarResult, PatchSummary
from .rules import load_rules, parse_rule_line, parse_rules
from .texture_cache import ContainerTextureCache, LazyKn5
from .transparency import TransparencyFixer
from .utils import format_size, join_readable, word_wrap, ensure_file_name_valid, ensure_unique

__all__ = [
    # Settings and rules
    'PatchSettings',
    'TextureRule',
    'load_rules',
    'parse_rule_line',
    'parse_rules',
    # Formats
    'CompressFormat',
    'parse_format',
    'resolve_format',
    # Alpha analysis
    'AlphaDecision',
    'AlphaFixResult',
    'classify_alpha',
    'flatten_alpha',
    'stretch_alpha',
    'normalize_transparency',
    # Texture I/O
    'is_dds',
    'parse_dds_header',
    'decode_image',
    'encode_png',
    'TextureCompressor',
    'find_texconv',
    'TransparencyFixer',
    # KN5 and car data
    'read_kn5_textures',
    'write_kn5_textures',
    'LazyKn5',
    'ContainerTextureCache',
    'find_main_kn5',
    'get_car_name',
    'find_ac_root',
    'get_cars_directory',
    # Pipeline
    'BannerPatcher',
    'CarResult',
    'PatchSummary',
    'PatchArchive',
    'build_mod_prefix',
    'encode_comment',
    # Errors
    'ConfigurationError',
    'FormatResolutionError',
    'TextureProcessingError',
    'TextureDecodeError',
    'CompressorError',
    'Kn5FormatError',
    'TextureNotFoundError',
    'CarSkippedError',
    'MissingKn5Error',
    'MissingSkinsError',
    # Formatting utilities
    'format_size',
    'join_readable',
    'word_wrap',
    'ensure_file_name_valid',
    'ensure_unique',
]
