"""Transparency Banner Patcher: makes windscreen banner textures of AC cars non-transparent"""

__version__ = "1.0.0"
