# abi_downloader/config.py
import os
from configparser import ConfigParser, Error as ConfigParserError

from abi_downloader.errors import ConfigError

API_KEY_SECTION = "api_keys"
API_KEY_NAME = "ETHERSCAN_API_KEY"


class BaseConfig:
    # --- Etherscan v2 ---
    ETHERSCAN_V2_BASE = os.environ.get("ETHERSCAN_V2_BASE", "https://api.etherscan.io/v2/api")
    ETHERSCAN_CHAIN_ID = os.environ.get("ETHERSCAN_CHAIN_ID", "1")  # mainnet
    ETHERSCAN_TIMEOUT = float(os.environ.get("ETHERSCAN_TIMEOUT", "20"))

    # --- Pacing ---
    # Free tier allows 3 calls/second
    RATE_LIMIT_SECONDS = float(os.environ.get("ABI_RATE_LIMIT_SECONDS", "0.333"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "json")


class DevelopmentConfig(BaseConfig):
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG")
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "text")


class ProductionConfig(BaseConfig):
    pass


class TestingConfig(BaseConfig):
    ETHERSCAN_V2_BASE = "http://etherscan.invalid/v2/api"
    RATE_LIMIT_SECONDS = 0.0
    LOG_FORMAT = "text"


config_map = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def get_config(name: str = "production"):
    return config_map.get((name or "").lower(), ProductionConfig)


def read_api_key(config_path) -> str:
    """
    Read the Etherscan API key from an INI file:

        [api_keys]
        ETHERSCAN_API_KEY = ...

    Key lookup is case-insensitive. Raises ConfigError on any failure.
    """
    parser = ConfigParser(interpolation=None)  # keys may contain "%"
    try:
        loaded = parser.read(config_path, encoding="utf-8")
    except (ConfigParserError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to load config file: {e}") from e
    if not loaded:
        raise ConfigError(f"Failed to load config file: {config_path} not found or unreadable")

    if not parser.has_section(API_KEY_SECTION):
        raise ConfigError("Could not find API key section in config file")

    value = parser.get(API_KEY_SECTION, API_KEY_NAME, fallback="").strip()
    if not value:
        raise ConfigError(f"Could not find {API_KEY_NAME} in config file")
    return value
