# abi_downloader/cli.py
import argparse
import logging
from pathlib import Path
from typing import List, Optional

from abi_downloader import __version__
from abi_downloader.config import get_config, read_api_key
from abi_downloader.logging_setup import setup_logging
from abi_downloader.services.abi_service import create_etherscan_client
from abi_downloader.services.address_service import read_addresses
from abi_downloader.services.table_service import ParquetTableStore
from abi_downloader.tasks.download_tasks import AbiDownloader

logger = logging.getLogger("abi_downloader")

ALL_FUNCTIONS_FILE = "all_functions.parquet"
ALL_EVENTS_FILE = "all_events.parquet"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="abi-downloader",
        description="Download verified contract ABIs from Etherscan and write function/event selectors to Parquet.",
    )
    p.add_argument("-a", "--addresses", required=True, help="Path to the file containing contract addresses")
    p.add_argument("-o", "--output-dir", required=True, type=Path, help="Directory to output the parquet files")
    p.add_argument("-c", "--config", required=True, type=Path, help="Path to the config file")
    p.add_argument("--chain-id", help="Etherscan v2 chainid (default from ETHERSCAN_CHAIN_ID or 1)")
    p.add_argument("--rate-limit", type=float, help="Seconds to wait between requests (default 0.333)")
    p.add_argument("--log-level", help="Logging level (default INFO)")
    p.add_argument("--log-format", choices=("json", "text"), help="Log line format (default json)")
    p.add_argument("--env", default="production", help="Settings profile: production | development | testing")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p.parse_args(argv)


def _download_and_merge(args: argparse.Namespace, config, client) -> int:
    try:
        addresses = read_addresses(args.addresses)
    except Exception as e:
        logger.error("Failed to read addresses from %s: %s", args.addresses, e)
        return 1

    store = ParquetTableStore()
    rate_limit = config.RATE_LIMIT_SECONDS if args.rate_limit is None else args.rate_limit
    downloader = AbiDownloader(client, store=store, rate_limit=rate_limit, logger=logger)
    try:
        function_files, event_files = downloader.run(addresses, args.output_dir)
    except Exception as e:
        logger.error("Failed to download ABIs: %s", e)
        return 1

    try:
        store.concat_files(function_files, args.output_dir / ALL_FUNCTIONS_FILE)
    except Exception as e:
        logger.error("Failed to concatenate function files: %s", e)
        return 1

    try:
        store.concat_files(event_files, args.output_dir / ALL_EVENTS_FILE)
    except Exception as e:
        logger.error("Failed to concatenate event files: %s", e)
        return 1

    logger.info("ABI download and processing completed successfully.")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    config = get_config(args.env)
    setup_logging(args.log_level or config.LOG_LEVEL, args.log_format or config.LOG_FORMAT)

    try:
        api_key = read_api_key(args.config)
    except Exception as e:
        logger.error("Failed to read API key from %s: %s", args.config, e)
        return 1

    try:
        client = create_etherscan_client(api_key, config=config, chain_id=args.chain_id)
    except Exception as e:
        logger.error("Failed to create Etherscan client: %s", e)
        return 1

    try:
        return _download_and_merge(args, config, client)
    finally:
        client.close()
