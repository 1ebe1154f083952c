# abi_downloader/tasks/download_tasks.py
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List, Optional, Protocol, Sequence, Tuple

import pyarrow as pa

from abi_downloader.config import BaseConfig
from abi_downloader.errors import AbiFetchError, OutputDirError
from abi_downloader.models import AbiRecord
from abi_downloader.services.address_service import normalize_address
from abi_downloader.services.signature_service import process_contract
from abi_downloader.services.table_service import ParquetTableStore

FUNCTIONS_DIR = "functions"
EVENTS_DIR = "events"


class AbiClient(Protocol):
    def fetch_abi(self, address: str) -> List[dict]: ...


class TableStore(Protocol):
    def write_rows(self, records: Sequence[AbiRecord], path: Any) -> Any: ...

    def concat_files(self, input_paths: Sequence[Any], output_path: Any) -> Any: ...


@dataclass
class DownloadResult:
    function_files: List[Path] = field(default_factory=list)
    event_files: List[Path] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


class AbiDownloader:
    """
    Fetch one ABI per address, in order, one request at a time, and write a
    functions/events table pair per address as soon as it is processed.

    Fetch or write failures for one address are logged and skipped; an
    invalid address or an unusable output directory aborts the run.
    """

    def __init__(
        self,
        client: AbiClient,
        store: Optional[TableStore] = None,
        rate_limit: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
        logger: Optional[logging.Logger] = None,
    ):
        self.client = client
        self.store = store or ParquetTableStore()
        self.rate_limit = BaseConfig.RATE_LIMIT_SECONDS if rate_limit is None else rate_limit
        self.sleep = sleep
        self.logger = logger or logging.getLogger(__name__)

    def _prepare_dirs(self, output_dir: Path) -> Tuple[Path, Path]:
        functions_dir = output_dir / FUNCTIONS_DIR
        events_dir = output_dir / EVENTS_DIR
        for d in (functions_dir, events_dir):
            try:
                d.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise OutputDirError(f"failed to create {d.name} output dir: {e}") from e
        return functions_dir, events_dir

    def _write_pair(self, address: str, abi: List[dict], functions_dir: Path, events_dir: Path) -> Tuple[Path, Path]:
        functions, events = process_contract(address, abi)
        function_file = functions_dir / f"{address}_functions.parquet"
        event_file = events_dir / f"{address}_events.parquet"
        try:
            self.store.write_rows(functions, function_file)
            self.store.write_rows(events, event_file)
        except (OSError, pa.ArrowException):
            # an address contributes both files or none
            function_file.unlink(missing_ok=True)
            event_file.unlink(missing_ok=True)
            raise
        self.logger.debug(
            "%s: %d functions, %d events", address, len(functions), len(events)
        )
        return function_file, event_file

    def download(self, addresses: Sequence[str], output_dir) -> DownloadResult:
        output_dir = Path(output_dir)
        functions_dir, events_dir = self._prepare_dirs(output_dir)

        result = DownloadResult()
        total = len(addresses)
        for index, address_str in enumerate(addresses, start=1):
            self.logger.info("Downloading ABI for address %s (%d/%d)", address_str, index, total)
            address = normalize_address(address_str)

            try:
                abi = self.client.fetch_abi(address)
                function_file, event_file = self._write_pair(address, abi, functions_dir, events_dir)
            except (AbiFetchError, OSError, pa.ArrowException) as e:
                self.logger.warning("Failed to fetch ABI for address %s: %s", address_str, e)
                result.skipped.append(address)
            else:
                result.function_files.append(function_file)
                result.event_files.append(event_file)

            self.sleep(self.rate_limit)

        self.logger.info(
            "Processed %d addresses: %d written, %d skipped",
            total, len(result.function_files), len(result.skipped),
        )
        return result

    def run(self, addresses: Sequence[str], output_dir) -> Tuple[List[Path], List[Path]]:
        result = self.download(addresses, output_dir)
        return result.function_files, result.event_files


def download_abis(client: AbiClient, addresses: Sequence[str], output_dir, **kwargs) -> Tuple[List[Path], List[Path]]:
    return AbiDownloader(client, **kwargs).run(addresses, output_dir)
