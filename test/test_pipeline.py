import re

import pytest
from fontTools.ttLib import TTFont

import svg_to_font.pipeline as pipeline
from fakes import FakeRunner
from svg_to_font.cli import main
from svg_to_font.config import FontMode, GenerateConfig
from svg_to_font.errors import (
    DeliveryError,
    InputError,
    InputNotFoundError,
    PrerequisiteError,
    ToolExecutionError,
    UsageError,
)
from svg_to_font.pipeline import deliver_artifacts, run_generation


@pytest.fixture
def temp_root(tmp_path):
    path = tmp_path / "tmp"
    path.mkdir()
    return path


def make_config(tmp_path, input_dir, temp_root, **overrides):
    values = dict(
        input_dir=input_dir,
        font_output_dir=tmp_path / "out" / "fonts",
        class_output_dir=tmp_path / "out" / "lib",
        temp_root=temp_root,
    )
    values.update(overrides)
    return GenerateConfig(**values)


def test_color_end_to_end(tmp_path, icon_dir, temp_root):
    config = make_config(tmp_path, icon_dir, temp_root, mode=FontMode.COLOR, include_all=True)

    result = run_generation(config, runner=FakeRunner())

    assert result.glyph_map == {"2fast": 0xE000, "home_icon": 0xE001, "search": 0xE002}
    assert result.font_path == tmp_path / "out" / "fonts" / "camus_icons.ttf"
    assert result.dart_path == tmp_path / "out" / "lib" / "camus_icons.dart"
    assert result.font_path.stat().st_size > 256

    source = result.dart_path.read_text(encoding="utf-8")
    constants = re.findall(r"static const IconData (\w+) = IconData\(\n\s+(0x[0-9a-f]+),", source)
    assert constants == [("icon_2fast", "0xe000"), ("home_icon", "0xe001"), ("search", "0xe002")]
    assert "static const String fontFamily = 'CamusIcons';" in source
    assert f"/// File: {icon_dir / 'Home Icon.svg'}" in source
    assert re.findall(r"^    '([^']+)': (\w+),$", source, flags=re.MULTILINE) == [
        ("2fast", "icon_2fast"),
        ("home_icon", "home_icon"),
        ("search", "search"),
    ]
    # Workspace is gone once the run finishes.
    assert list(temp_root.iterdir()) == []


def test_color_runs_are_repeatable(tmp_path, icon_dir, temp_root):
    config = make_config(tmp_path, icon_dir, temp_root, mode=FontMode.COLOR)

    first = run_generation(config, runner=FakeRunner())
    first_source = first.dart_path.read_text(encoding="utf-8")
    second = run_generation(config, runner=FakeRunner())

    assert first.glyph_map == second.glyph_map
    assert second.dart_path.read_text(encoding="utf-8") == first_source


def test_mono_end_to_end(tmp_path, icon_dir, temp_root):
    runner = FakeRunner()
    config = make_config(tmp_path, icon_dir, temp_root, class_name="AppIcons", package_name="my_app")

    result = run_generation(config, runner=runner)

    assert runner.commands() == ["node", "npm", "npm", "fantasticon"]
    assert result.font_path.name == "app_icons.ttf"
    assert result.dart_path.name == "app_icons.dart"
    source = result.dart_path.read_text(encoding="utf-8")
    assert "static const String? fontPackage = 'my_app';" in source
    assert "0xf101," in source


def test_empty_input_writes_nothing(tmp_path, temp_root):
    empty = tmp_path / "empty"
    empty.mkdir()
    (empty / "photo.png").write_bytes(b"\x89PNG")
    runner = FakeRunner()

    with pytest.raises(InputError):
        run_generation(make_config(tmp_path, empty, temp_root), runner=runner)

    assert runner.calls == []
    assert not (tmp_path / "out").exists()
    assert list(temp_root.iterdir()) == []


def test_missing_input_is_reported_before_workspace(tmp_path, temp_root):
    with pytest.raises(InputNotFoundError):
        run_generation(make_config(tmp_path, tmp_path / "nope", temp_root), runner=FakeRunner())

    assert list(temp_root.iterdir()) == []


def test_prerequisite_failure_skips_generation(tmp_path, icon_dir, temp_root):
    runner = FakeRunner(missing={"node"})

    with pytest.raises(PrerequisiteError):
        run_generation(make_config(tmp_path, icon_dir, temp_root), runner=runner)

    assert runner.commands() == ["node"]
    assert not (tmp_path / "out").exists()
    assert list(temp_root.iterdir()) == []


def test_tool_failure_cleans_workspace(tmp_path, icon_dir, temp_root):
    runner = FakeRunner(failing={"nanoemoji"})
    config = make_config(tmp_path, icon_dir, temp_root, mode=FontMode.COLOR)

    with pytest.raises(ToolExecutionError):
        run_generation(config, runner=runner)

    assert list(temp_root.iterdir()) == []
    assert not (tmp_path / "out").exists()


def test_keep_temp_retains_workspace(tmp_path, icon_dir, temp_root):
    config = make_config(tmp_path, icon_dir, temp_root, mode=FontMode.COLOR, keep_temp=True)

    run_generation(config, runner=FakeRunner())

    (kept,) = temp_root.iterdir()
    assert kept.name.startswith("svg_to_font_build_")
    assert (kept / "raw_icons" / "home_icon.svg").exists()


def test_delete_input(tmp_path, icon_dir, temp_root):
    config = make_config(tmp_path, icon_dir, temp_root, mode=FontMode.COLOR, delete_input=True)

    result = run_generation(config, runner=FakeRunner())

    assert not icon_dir.exists()
    assert result.font_path.exists()


def test_delete_input_refuses_outputs_inside_input(tmp_path, icon_dir, temp_root):
    config = make_config(
        tmp_path,
        icon_dir,
        temp_root,
        font_output_dir=icon_dir / "fonts",
        delete_input=True,
    )

    with pytest.raises(UsageError):
        run_generation(config, runner=FakeRunner())
    assert icon_dir.exists()


def test_invalid_class_name_aborts_early(tmp_path, icon_dir, temp_root):
    runner = FakeRunner()

    with pytest.raises(UsageError, match="Invalid class name"):
        run_generation(make_config(tmp_path, icon_dir, temp_root, class_name="my-icons"), runner=runner)

    assert runner.calls == []
    assert list(temp_root.iterdir()) == []


def test_delivery_failure(tmp_path):
    font = tmp_path / "font.ttf"
    font.write_bytes(b"\0" * 1024)
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(DeliveryError):
        deliver_artifacts(font, "// code\n", blocker, tmp_path / "lib", "icons")


def test_cli_success(tmp_path, icon_dir, monkeypatch):
    monkeypatch.setattr(pipeline, "ProcessRunner", lambda **kwargs: FakeRunner())
    fonts = tmp_path / "fonts"
    lib = tmp_path / "lib"

    code = main(["-i", str(icon_dir), "-o", str(fonts), "-c", str(lib), "-n", "AppIcons", "--color", "--all-icons-map"])

    assert code == 0
    assert (fonts / "app_icons.ttf").exists()
    assert "static const Map<String, IconData> all" in (lib / "app_icons.dart").read_text(encoding="utf-8")


def test_cli_missing_input_directory(tmp_path, caplog):
    code = main(["-i", str(tmp_path / "missing"), "-o", str(tmp_path / "f"), "-c", str(tmp_path / "c")])

    assert code == 1
    assert "Input directory does not exist" in caplog.text


def test_cli_empty_input_directory(tmp_path, caplog):
    empty = tmp_path / "empty"
    empty.mkdir()

    code = main(["-i", str(empty), "-o", str(tmp_path / "f"), "-c", str(tmp_path / "c")])

    assert code == 1
    assert "No usable SVG files" in caplog.text
    assert not (tmp_path / "f").exists()


def test_cli_invalid_class_name(tmp_path, icon_dir):
    code = main(["-i", str(icon_dir), "-o", str(tmp_path / "f"), "-c", str(tmp_path / "c"), "-n", "2Icons"])

    assert code == 2


def test_cli_unexpected_error(tmp_path, icon_dir, monkeypatch, caplog):
    def explode(*args, **kwargs):
        raise RuntimeError("kaboom")

    monkeypatch.setattr("svg_to_font.cli.run_generation", explode)

    code = main(["-i", str(icon_dir), "-o", str(tmp_path / "f"), "-c", str(tmp_path / "c")])

    assert code == 1
    assert "Unexpected error: kaboom" in caplog.text


def test_cli_requires_paths():
    with pytest.raises(SystemExit) as excinfo:
        main(["-i", "icons"])
    assert excinfo.value.code == 2


@pytest.mark.parametrize("mode", [FontMode.MONO, FontMode.COLOR])
def test_font_family_matches_dart_constant_in_both_modes(tmp_path, icon_dir, temp_root, mode):
    config = make_config(tmp_path, icon_dir, temp_root, mode=mode, class_name="AppIcons")

    result = run_generation(config, runner=FakeRunner())

    with TTFont(result.font_path) as font:
        assert font["name"].getBestFamilyName() == "AppIcons"
    assert "static const String fontFamily = 'AppIcons';" in result.dart_path.read_text(encoding="utf-8")
    assert result.font_path.name == "app_icons.ttf"
