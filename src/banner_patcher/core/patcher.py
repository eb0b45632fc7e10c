"""
Core logic for the transparency banner patcher.

Walks cars -> skins -> rule textures, fixes every listed texture and stores
the results in the patch archive.
"""

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from .archive import PatchArchive
from .car_data import find_main_kn5
from .dds_parser import is_dds, parse_dds_header
from .errors import CarSkippedError, MissingKn5Error, MissingSkinsError, TextureNotFoundError, \
    TextureProcessingError
from .patch_settings import TextureRule
from .texture_cache import ContainerTextureCache, LazyKn5
from .transparency import TransparencyFixer


def _print_error(message: str):
    print(message, file=sys.stderr)


@dataclass
class CarResult:
    """Result from processing a single car"""
    car_id: str
    skins: int = 0
    fixed: int = 0
    skipped: int = 0
    missing: int = 0
    kn5_opened: bool = False


@dataclass
class PatchSummary:
    """Result of a whole run"""
    cars: List[CarResult] = field(default_factory=list)
    failed_cars: Dict[str, str] = field(default_factory=dict)

    @property
    def textures_fixed(self) -> int:
        return sum(c.fixed for c in self.cars)

    @property
    def textures_skipped(self) -> int:
        return sum(c.skipped for c in self.cars)


class BannerPatcher:
    """Drives the texture fixes for a list of cars"""

    def __init__(self, fixer: TransparencyFixer,
                 log_callback: Optional[Callable[[str], None]] = None,
                 error_callback: Optional[Callable[[str], None]] = None):
        self.fixer = fixer
        self.log = log_callback or print
        self.error = error_callback or _print_error

    def _fix(self, data: bytes, rule: TextureRule) -> Optional[bytes]:
        return self.fixer.fix(data, rule.preferred_format, rule.texture_name)

    def _log_source_format(self, data: bytes):
        if not is_dds(data):
            return
        dims, format_str = parse_dds_header(data)
        if dims is not None:
            self.log(f"    Format: {format_str}, {dims[0]}x{dims[1]}")

    def process_car(self, car_id: str, cars_dir: Path, rules: List[TextureRule],
                    archive: PatchArchive) -> CarResult:
        """
        Fix all rule textures for every skin of a car.

        Raises:
            MissingKn5Error: If the car has no main KN5
            MissingSkinsError: If the car has no skins directory
            TextureProcessingError: If a texture can't be decoded or recompressed
        """
        car_dir = Path(cars_dir) / car_id

        kn5_path = find_main_kn5(car_dir)
        if kn5_path is None or not kn5_path.is_file():
            raise MissingKn5Error(f"{car_id}: main KN5-file not found")

        skins_dir = car_dir / "skins"
        if not skins_dir.is_dir():
            raise MissingSkinsError(f"{car_id}: skins directory not found")

        kn5 = LazyKn5(kn5_path)
        cache = ContainerTextureCache(kn5, self.fixer.fix)
        result = CarResult(car_id)

        for skin_dir in sorted(p for p in skins_dir.iterdir() if p.is_dir()):
            self.log(f"Skin: {skin_dir.name}")
            result.skins += 1

            for rule in rules:
                self.log(f"  Texture: {rule.texture_name}")

                override = skin_dir / rule.texture_name
                try:
                    if override.is_file():
                        source = override.read_bytes()
                        self._log_source_format(source)
                        data = self._fix(source, rule)
                    else:
                        self._log_source_format(kn5.get_texture(rule.texture_name))
                        data = cache.get(rule)
                except TextureNotFoundError as e:
                    self.error(f"    {car_id}: {e}")
                    result.missing += 1
                    continue

                if data is not None:
                    archive.write_texture(car_id, skin_dir.name, rule.texture_name, data)
                    self.log("    Fixed and saved within patch file")
                    result.fixed += 1
                else:
                    self.log("    Either not a semi-transparent or fully transparent texture, skip")
                    result.skipped += 1

        result.kn5_opened = kn5.is_open
        return result

    def run(self, car_ids: Iterable[str], cars_dir: Path, rules: Dict[str, List[TextureRule]],
            archive: PatchArchive) -> PatchSummary:
        """
        Process cars one after another.

        Cars without rules are ignored. A car with missing data or a broken
        texture is reported and skipped; the rest of the run continues.
        """
        summary = PatchSummary()
        for car_id in car_ids:
            car_rules = rules.get(car_id)
            if not car_rules:
                continue

            try:
                summary.cars.append(self.process_car(car_id, cars_dir, car_rules, archive))
            except CarSkippedError as e:
                self.error(f"    {e}")
                summary.failed_cars[car_id] = str(e)
            except TextureProcessingError as e:
                self.error(f"    {car_id}: {e}")
                summary.failed_cars[car_id] = str(e)

        return summary
