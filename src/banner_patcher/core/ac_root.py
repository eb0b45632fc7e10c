"""Finding the Assetto Corsa install through Steam"""

import os
import platform
import re
from pathlib import Path
from typing import Iterator, List, Optional

from .errors import ConfigurationError


AC_STEAM_FOLDER = Path("steamapps") / "common" / "assettocorsa"

# Matches both the current ("path" "...") and the legacy ("1" "...") library formats
_LIBRARY_PATH_RE = re.compile(r'^\s*"(?:path|\d+)"\s+"([^"]+)"', re.MULTILINE)


def get_cars_directory(ac_root: Path) -> Path:
    return Path(ac_root) / "content" / "cars"


def is_ac_root(path: Path) -> bool:
    return get_cars_directory(path).is_dir()


def _steam_path_from_registry() -> Optional[Path]:
    import winreg

    for hive, key_path, value_name in (
        (winreg.HKEY_CURRENT_USER, r"Software\Valve\Steam", "SteamPath"),
        (winreg.HKEY_LOCAL_MACHINE, r"SOFTWARE\WOW6432Node\Valve\Steam", "InstallPath"),
        (winreg.HKEY_LOCAL_MACHINE, r"SOFTWARE\Valve\Steam", "InstallPath"),
    ):
        try:
            with winreg.OpenKey(hive, key_path) as key:
                value, _ = winreg.QueryValueEx(key, value_name)
        except OSError:
            continue
        if value:
            return Path(value)
    return None


def find_steam_directories() -> List[Path]:
    """Candidate Steam installation directories for this platform"""
    candidates = []
    if platform.system() == 'Windows':
        from_registry = _steam_path_from_registry()
        if from_registry:
            candidates.append(from_registry)
        for env in ("ProgramFiles(x86)", "ProgramFiles"):
            base = os.environ.get(env)
            if base:
                candidates.append(Path(base) / "Steam")
    else:
        home = Path.home()
        candidates.extend([
            home / ".steam" / "steam",
            home / ".local" / "share" / "Steam",
            home / "Library" / "Application Support" / "Steam",
        ])
    return [p for p in candidates if p.is_dir()]


def parse_library_folders(vdf_text: str) -> List[Path]:
    """Extract library paths from a libraryfolders.vdf"""
    return [Path(m.group(1).replace('\\\\', '\\')) for m in _LIBRARY_PATH_RE.finditer(vdf_text)]


def _library_roots(steam_dir: Path) -> Iterator[Path]:
    yield steam_dir
    vdf = steam_dir / "steamapps" / "libraryfolders.vdf"
    if vdf.is_file():
        yield from parse_library_folders(vdf.read_text(encoding='utf-8', errors='replace'))


def try_find_ac_root() -> Optional[Path]:
    """
    Look for the AC install folder.

    The AC_ROOT environment variable wins; otherwise every Steam library is
    searched for steamapps/common/assettocorsa.
    """
    from_env = os.environ.get("AC_ROOT")
    if from_env and is_ac_root(Path(from_env)):
        return Path(from_env)

    for steam_dir in find_steam_directories():
        for library in _library_roots(steam_dir):
            candidate = library / AC_STEAM_FOLDER
            if is_ac_root(candidate):
                return candidate
    return None


def find_ac_root() -> Path:
    """
    Raises:
        ConfigurationError: If AC can't be found
    """
    ac_root = try_find_ac_root()
    if ac_root is None:
        raise ConfigurationError("Fail to find AC root directory")
    return ac_root
