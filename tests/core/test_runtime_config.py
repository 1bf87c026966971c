from pathlib import Path

import pytest

from plakat.core.runtime_config import output_root_dir, runtime_config, set_config_path


@pytest.fixture(autouse=True)
def _reset_runtime_config() -> None:
    set_config_path(None)
    yield
    set_config_path(None)


def _isolate_config_discovery(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


def test_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    assert output_root_dir() == Path("output")
    cfg = runtime_config()
    assert cfg.config_path is None
    assert cfg.png_scale == 2.0
    anim = cfg.animation
    assert anim.delay_per_element_ms == 90
    assert anim.initial_delay_ms == 400
    assert anim.finish_delay_ms == 400
    assert anim.min_duration_ms == 550
    assert anim.duration_jitter_ms == 250
    assert anim.overlay_duration_ms == 1000
    assert anim.easing == "cubic-bezier(0.22, 1, 0.36, 1)"


def test_runtime_config_is_cached(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    assert runtime_config() is runtime_config()


def test_discovered_config_overrides_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    discovered = tmp_path / ".plakat" / "config.yaml"
    discovered.parent.mkdir(parents=True, exist_ok=True)
    discovered.write_text('paths:\n  output_dir: "./out_discovered"\n', encoding="utf-8")

    cfg = runtime_config()
    assert cfg.config_path == discovered
    assert cfg.output_dir == Path("out_discovered")
    # 上書きはトップレベルキー単位。animation は同梱値のまま
    assert cfg.animation.delay_per_element_ms == 90


def test_home_config_is_discovered(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    home_cfg = tmp_path / ".config" / "plakat" / "config.yaml"
    home_cfg.parent.mkdir(parents=True, exist_ok=True)
    home_cfg.write_text("export:\n  png:\n    scale: 4\n", encoding="utf-8")

    cfg = runtime_config()
    assert cfg.config_path == home_cfg
    assert cfg.png_scale == 4.0


def test_explicit_config_overrides_discovered_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    discovered = tmp_path / ".plakat" / "config.yaml"
    discovered.parent.mkdir(parents=True, exist_ok=True)
    discovered.write_text('paths:\n  output_dir: "./out_discovered"\n', encoding="utf-8")

    explicit = tmp_path / "explicit.yaml"
    explicit.write_text(
        "\n".join(
            [
                'paths:',
                '  output_dir: "./out_explicit"',
                "animation:",
                "  delay_per_element_ms: 10",
                "  initial_delay_ms: 0",
                "  finish_delay_ms: 5",
                "  min_duration_ms: 100",
                "  duration_jitter_ms: 0",
                "  overlay_duration_ms: 200",
                '  easing: "linear"',
                "",
            ]
        ),
        encoding="utf-8",
    )
    set_config_path(explicit)

    assert output_root_dir() == Path("out_explicit")
    cfg = runtime_config()
    assert cfg.config_path == explicit
    assert cfg.animation.delay_per_element_ms == 10
    assert cfg.animation.easing == "linear"


def test_explicit_config_path_missing_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    set_config_path(tmp_path / "missing.yaml")
    with pytest.raises(FileNotFoundError):
        output_root_dir()


@pytest.mark.parametrize(
    ("text", "exc", "key"),
    [
        ("version: 2\n", RuntimeError, "version"),
        ("export:\n  png:\n    scale: 0\n", ValueError, "export.png.scale"),
        ("export:\n  png:\n    scale: abc\n", RuntimeError, "export.png.scale"),
        ("animation: 3\n", RuntimeError, "animation"),
        ("paths: []\n", RuntimeError, "paths"),
        ("- a\n- b\n", RuntimeError, "mapping"),
    ],
)
def test_invalid_config_names_the_key(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, text, exc, key):
    _isolate_config_discovery(tmp_path, monkeypatch)

    explicit = tmp_path / "bad.yaml"
    explicit.write_text(text, encoding="utf-8")
    set_config_path(explicit)

    with pytest.raises(exc) as info:
        runtime_config()
    assert key in str(info.value)


def test_negative_animation_timing_is_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    explicit = tmp_path / "bad.yaml"
    explicit.write_text(
        "animation:\n  delay_per_element_ms: -1\n  initial_delay_ms: 0\n  finish_delay_ms: 0\n"
        "  min_duration_ms: 0\n  duration_jitter_ms: 0\n  overlay_duration_ms: 0\n  easing: linear\n",
        encoding="utf-8",
    )
    set_config_path(explicit)

    with pytest.raises(ValueError, match="animation.delay_per_element_ms"):
        runtime_config()
