"""End-to-end tests for the command line"""

import io
import zipfile

import pytest
from PIL import Image

from banner_patcher.cli import build_parser, main


@pytest.fixture
def rules_file(tmp_path):
    path = tmp_path / "Rules.txt"
    path.write_text("car_a: banner.png\ncar_b: banner.png\n# car_c: banner.png\n", encoding="utf-8")
    return path


@pytest.fixture
def two_cars(make_car, banner_png, opaque_png):
    car_a = make_car("car_a", kn5_textures={"banner.png": banner_png}, skins={"red": {}, "blue": {}})
    (car_a / "data").mkdir()
    (car_a / "data" / "car.ini").write_text("[INFO]\nSCREEN_NAME=Car A\n")
    make_car("car_b", kn5_textures={"banner.png": opaque_png}, skins={"only": {}})


def test_defaults() -> None:
    args = build_parser().parse_args([])
    assert args.cars == []
    assert args.mod and args.gradients and args.mipmaps
    assert not args.dxt1 and not args.production_quality
    assert args.gradient_threshold == 0.4


def test_help_exits_zero(capsys) -> None:
    assert main(["--help"]) == 0
    assert "--gradient-threshold" in capsys.readouterr().out


@pytest.mark.parametrize("argv", [["--gradient-threshold", "2"], ["--gradient-threshold", "abc"], ["--bogus"]])
def test_bad_arguments_exit_one(argv) -> None:
    assert main(argv) == 1


def test_missing_rules_file_exits_two(tmp_path, cars_dir, capsys) -> None:
    code = main(["-r", str(tmp_path / "missing.txt"), "-d", str(cars_dir)])
    assert code == 2
    assert "missing.txt" in capsys.readouterr().err


def test_no_cars_exits_two(rules_file, cars_dir) -> None:
    assert main(["-r", str(rules_file), "-d", str(cars_dir), "-o", str(cars_dir / "patch.zip")]) == 2


def test_mod_patch(rules_file, cars_dir, two_cars, tmp_path, capsys) -> None:
    output = tmp_path / "patch.zip"
    assert main(["car_a", "-r", str(rules_file), "-d", str(cars_dir), "-o", str(output)]) == 0

    prefix = "MODS/Transparency Banner Patch For Car A"
    with zipfile.ZipFile(output) as zf:
        assert sorted(zf.namelist()) == [
            f"{prefix}/Description.jsgme",
            f"{prefix}/content/cars/car_a/skins/blue/banner.png",
            f"{prefix}/content/cars/car_a/skins/red/banner.png",
        ]
        assert b"Affects: Car A." in zf.comment
        image = Image.open(io.BytesIO(zf.read(f"{prefix}/content/cars/car_a/skins/red/banner.png")))
        assert image.mode == "RGBA"

    out = capsys.readouterr().out
    assert "Skin: blue" in out
    assert "Fixed and saved within patch file" in out


def test_plain_patch_for_all_rule_cars(rules_file, cars_dir, two_cars, tmp_path) -> None:
    output = tmp_path / "patch.zip"
    output.touch()
    assert main(["-r", str(rules_file), "-d", str(cars_dir), "-o", str(output), "--no-mod"]) == 0

    with zipfile.ZipFile(tmp_path / "patch-1.zip") as zf:
        assert sorted(zf.namelist()) == [
            "content/cars/car_a/skins/blue/banner.png",
            "content/cars/car_a/skins/red/banner.png",
        ]
        assert b"Car A and car_b" in zf.comment
