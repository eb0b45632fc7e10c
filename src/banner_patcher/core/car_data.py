"""Reading bits of a car folder: main KN5 location and display name"""

import configparser
import json
from pathlib import Path
from typing import Optional


def _read_ini(path: Path) -> configparser.ConfigParser:
    """Read an AC-style ini (';' comments, duplicate keys, no interpolation)"""
    parser = configparser.ConfigParser(
        strict=False,
        interpolation=None,
        inline_comment_prefixes=(';', '//'),
        comment_prefixes=(';', '#', '//'),
    )
    parser.optionxform = str.upper
    parser.read_string(path.read_text(encoding='utf-8-sig', errors='replace'))
    return parser


def _ini_value(path: Path, section: str, key: str) -> Optional[str]:
    if not path.is_file():
        return None
    try:
        parser = _read_ini(path)
    except configparser.Error:
        return None
    value = parser.get(section, key, fallback='').strip()
    return value or None


def find_main_kn5(car_dir: Path) -> Optional[Path]:
    """
    Find the car's main (LOD 0) KN5.

    Checks data/lods.ini first, then <car_id>.kn5, then the largest
    non-LOD KN5 in the car folder.
    """
    from_lods = _ini_value(car_dir / "data" / "lods.ini", "LOD_0", "FILE")
    if from_lods:
        return car_dir / from_lods

    by_id = car_dir / f"{car_dir.name}.kn5"
    if by_id.is_file():
        return by_id

    candidates = [p for p in car_dir.glob("*.kn5") if "_lod" not in p.stem.lower()]
    if not candidates:
        return None
    return max(candidates, key=lambda p: p.stat().st_size)


def get_car_name(car_dir: Path) -> str:
    """Display name from data/car.ini or ui/ui_car.json, falling back to the folder name"""
    screen_name = _ini_value(car_dir / "data" / "car.ini", "INFO", "SCREEN_NAME")
    if screen_name:
        return screen_name

    ui_car = car_dir / "ui" / "ui_car.json"
    if ui_car.is_file():
        try:
            data = json.loads(ui_car.read_text(encoding='utf-8-sig', errors='replace'), strict=False)
        except json.JSONDecodeError:
            data = None
        if isinstance(data, dict) and str(data.get("name") or "").strip():
            return str(data["name"]).strip()

    return car_dir.name
