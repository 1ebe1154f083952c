"""Download contract ABIs from Etherscan and store selectors as Parquet tables."""

__version__ = "0.1.0"
