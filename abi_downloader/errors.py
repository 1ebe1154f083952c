# abi_downloader/errors.py


class AbiDownloaderError(RuntimeError):
    """Base error for everything raised by the downloader."""


class ConfigError(AbiDownloaderError):
    """Credential file or settings could not be loaded."""


class AbiFetchError(AbiDownloaderError):
    """The explorer did not return a usable ABI for one address."""

    def __init__(self, address: str, reason: str):
        super().__init__(f"{address}: {reason}")
        self.address = address
        self.reason = reason


class OutputDirError(AbiDownloaderError):
    """Output subdirectories could not be created."""


class InvalidAddressError(AbiDownloaderError, ValueError):
    """An input line is not a 20-byte hex address."""
