from __future__ import annotations

from pathlib import Path

import pytest

from chainhash import HashMap
from chainhash.config import AppConfig, load_app_config
from chainhash.contracts.error import ConfigError


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "CHAINHASH_START_CAPACITY",
        "CHAINHASH_LOWER_BOUNDARY",
        "CHAINHASH_UPPER_BOUNDARY",
        "CHAINHASH_LOG_LEVEL",
        "CHAINHASH_LOG_JSON",
        "CHAINHASH_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)


def test_default_config_validates() -> None:
    cfg = load_app_config(None)
    assert cfg.resize.start_capacity == 16
    assert cfg.resize.lower_boundary == pytest.approx(0.25)
    assert cfg.resize.upper_boundary == pytest.approx(0.75)
    assert cfg.logging.level == "WARNING"
    assert cfg.logging.use_json is False


def test_load_from_toml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    cfg_path = tmp_path / "chainhash.toml"
    cfg_path.write_text(
        """
[resize]
start_capacity = 64
lower_boundary = 0.2
upper_boundary = 0.8

[logging]
level = "debug"
use_json = "yes"
log_file = "chainhash.log"
""",
        encoding="utf-8",
    )
    cfg = load_app_config(str(cfg_path))
    assert cfg.resize.start_capacity == 64
    assert cfg.resize.upper_boundary == pytest.approx(0.8)
    assert cfg.logging.level == "debug"
    assert cfg.logging.use_json is True
    assert cfg.logging.log_file == "chainhash.log"

    m: HashMap[str, int] = HashMap(policy=cfg.resize)
    assert m.capacity() == 64

    # env override takes precedence
    monkeypatch.setenv("CHAINHASH_START_CAPACITY", "128")
    monkeypatch.setenv("CHAINHASH_LOG_JSON", "off")
    monkeypatch.setenv("CHAINHASH_LOG_FILE", "")
    cfg_env = AppConfig.load(cfg_path)
    assert cfg_env.resize.start_capacity == 128
    assert cfg_env.logging.use_json is False
    assert cfg_env.logging.log_file is None


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_app_config(str(tmp_path / "absent.toml"))


def test_invalid_toml_raises(tmp_path: Path) -> None:
    bad_path = tmp_path / "bad.toml"
    bad_path.write_text("[resize\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_app_config(str(bad_path))


@pytest.mark.parametrize(
    "body",
    [
        "[resize]\nupper_boundary = 1.5\n",
        "[resize]\nstart_capacity = 12\n",
        "[resize]\nlower_boundary = 0.5\n",
        "[resize]\nlower_boundary = \"x\"\n",
        "[resize]\nupper_boundary = true\n",
        "[resize]\nbogus = 1\n",
        "[resize]\non_resize = 1\n",
        "resize = 3\n",
        "[logging]\nlevel = \"chatty\"\n",
        "[logging]\nuse_json = \"maybe\"\n",
        "[logging]\ncolour = true\n",
    ],
)
def test_invalid_values_raise(tmp_path: Path, body: str) -> None:
    bad_path = tmp_path / "bad.toml"
    bad_path.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_app_config(str(bad_path))


def test_bad_env_override_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHAINHASH_UPPER_BOUNDARY", "lots")
    with pytest.raises(ConfigError, match="CHAINHASH_UPPER_BOUNDARY"):
        load_app_config(None)


def test_env_override_is_validated(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHAINHASH_LOWER_BOUNDARY", "0.6")
    with pytest.raises(ConfigError):
        load_app_config(None)


def test_non_numeric_boundary_from_dict_raises_config_error() -> None:
    cfg = AppConfig.from_dict({"resize": {"lower_boundary": "x"}})
    with pytest.raises(ConfigError, match="lower_boundary must be a number"):
        cfg.validate()
