import pytest

from abi_downloader.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    get_config,
    read_api_key,
)
from abi_downloader.errors import ConfigError


def test_read_api_key(config_file):
    assert read_api_key(config_file) == "test-key"


def test_key_name_is_case_insensitive(tmp_path):
    path = tmp_path / "c.ini"
    path.write_text("[api_keys]\netherscan_api_key = lower\n", encoding="utf-8")
    assert read_api_key(path) == "lower"


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="Failed to load config file"):
        read_api_key(tmp_path / "missing.ini")


def test_missing_section(tmp_path):
    path = tmp_path / "c.ini"
    path.write_text("[other]\nETHERSCAN_API_KEY = x\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="section"):
        read_api_key(path)


@pytest.mark.parametrize("body", ["[api_keys]\n", "[api_keys]\nETHERSCAN_API_KEY =\n", "[api_keys]\nOTHER = x\n"])
def test_missing_or_empty_key(tmp_path, body):
    path = tmp_path / "c.ini"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError, match="ETHERSCAN_API_KEY"):
        read_api_key(path)


def test_malformed_file(tmp_path):
    path = tmp_path / "c.ini"
    path.write_text("no section header\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        read_api_key(path)


def test_get_config():
    assert get_config("testing") is TestingConfig
    assert get_config("Development") is DevelopmentConfig
    assert get_config("unknown") is ProductionConfig
    assert TestingConfig.RATE_LIMIT_SECONDS == 0.0


def test_percent_sign_in_key_is_literal(tmp_path):
    path = tmp_path / "c.ini"
    path.write_text("[api_keys]\nETHERSCAN_API_KEY = ab%cd\n", encoding="utf-8")
    assert read_api_key(path) == "ab%cd"
