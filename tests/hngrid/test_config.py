import pytest

from hngrid.config.fetch import Fetch
from hngrid.config.loader import config_path, load_raw_config, section
from hngrid.config.scoring import Scoring
from hngrid.config.thumbs import Thumbs


def test_defaults_without_file(monkeypatch, tmp_path):
    monkeypatch.delenv("HNGRID_THUMB_CONCURRENCY", raising=False)
    monkeypatch.delenv("HNGRID_FETCH_TIMEOUT", raising=False)
    assert load_raw_config(tmp_path / "absent.toml") == {}
    assert Thumbs({}).CONCURRENCY == 3
    assert Thumbs({}).LOOKAHEAD_PX == 400
    assert Fetch({}).TIMEOUT == 15.0


def test_toml_overrides_env(monkeypatch, tmp_path):
    cfg = tmp_path / "config.toml"
    cfg.write_text(
        """
[hngrid.thumbs]
concurrency = 5

[hngrid.scoring]
hero_keywords = ["lead", "masthead"]
min_score = 7
"""
    )
    monkeypatch.setenv("HNGRID_THUMB_CONCURRENCY", "9")
    monkeypatch.setenv("HNGRID_LOOKAHEAD_PX", "250")

    raw = load_raw_config(cfg)
    thumbs = Thumbs(raw)
    scoring = Scoring(raw)

    assert thumbs.CONCURRENCY == 5
    assert thumbs.LOOKAHEAD_PX == 250
    assert scoring.HERO_KEYWORDS == ["lead", "masthead"]
    assert scoring.MIN_SCORE == 7
    assert "icon" in scoring.DECOR_KEYWORDS


def test_invalid_values_rejected():
    with pytest.raises(ValueError):
        Thumbs({"hngrid": {"thumbs": {"concurrency": 0}}})
    with pytest.raises(ValueError):
        Fetch({"hngrid": {"fetch": {"timeout": 0}}})


def test_config_path_env_override(monkeypatch, tmp_path):
    cfg = tmp_path / "custom.toml"
    cfg.write_text("[hngrid.fetch]\ntimeout = 4\n")
    monkeypatch.setenv("HNGRID_CONFIG", str(cfg))

    assert config_path() == cfg
    assert Fetch(load_raw_config()).TIMEOUT == 4.0


def test_section_ignores_non_table_values():
    assert section({"hngrid": {"thumbs": "nope"}}, "thumbs") == {}
    assert section(None, "fetch") == {}
