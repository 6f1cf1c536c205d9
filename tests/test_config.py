"""Tests for RenderConfig/IndexConfig and TOML config loading."""

import tomllib
from pathlib import Path

import pytest
from pydantic import ValidationError

from fieldedmmi.config import CONFIG_ENV_VAR, IndexConfig, RenderConfig, load_config


class TestRenderConfig:
    def test_defaults(self) -> None:
        config = RenderConfig()
        assert config.max_rank == 1000
        assert config.title_fields == ("title", "TI")
        assert config.default_field == "text"
        assert config.strict is False
        assert config.score_policy == "last"
        assert config.merge_positions is False

    def test_is_frozen(self) -> None:
        with pytest.raises(ValidationError):
            RenderConfig().max_rank = 5  # type: ignore[misc]

    def test_rejects_bad_values(self) -> None:
        with pytest.raises(ValidationError):
            RenderConfig(max_rank=0)
        with pytest.raises(ValidationError):
            RenderConfig(score_policy="average")  # type: ignore[arg-type]
        with pytest.raises(ValidationError):
            RenderConfig(unknown_key=True)  # type: ignore[call-arg]


class TestLoadConfig:
    def test_defaults_when_no_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        monkeypatch.chdir(tmp_path)
        config = load_config()
        assert config.render == RenderConfig()
        assert config.index == IndexConfig()

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.toml"
        path.write_text(
            '[render]\nmax_rank = 50\ntitle_fields = ["ti"]\nscore_policy = "max"\n'
            '[index]\npath = "codes.txt"\ncache_size = 0\n',
            encoding="utf-8",
        )
        config = load_config(path)
        assert config.render.max_rank == 50
        assert config.render.title_fields == ("ti",)
        assert config.render.score_policy == "max"
        assert config.index.path == tmp_path / "codes.txt"
        assert config.index.cache_size == 0

    def test_absolute_index_path_is_kept(self, tmp_path: Path) -> None:
        index = tmp_path / "elsewhere" / "codes.txt"
        path = tmp_path / "custom.toml"
        path.write_text(f'[index]\npath = "{index.as_posix()}"\n', encoding="utf-8")
        assert load_config(path).index.path == index

    def test_missing_explicit_path(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.toml")

    def test_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "env.toml"
        path.write_text("[render]\nstrict = true\n", encoding="utf-8")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert load_config().render.strict is True

    def test_cwd_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        (tmp_path / "fieldedmmi.toml").write_text("[render]\nmerge_positions = true\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        assert load_config().render.merge_positions is True

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("[render\n", encoding="utf-8")
        with pytest.raises(tomllib.TOMLDecodeError):
            load_config(path)

    def test_unknown_key(self, tmp_path: Path) -> None:
        path = tmp_path / "typo.toml"
        path.write_text("[render]\nmax_rnak = 5\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(path)
