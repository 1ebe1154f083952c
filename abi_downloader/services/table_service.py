# abi_downloader/services/table_service.py
import logging
from pathlib import Path
from typing import Iterable, List, Sequence, Union

import pyarrow as pa
import pyarrow.parquet as pq

from abi_downloader.models import AbiRecord, RECORD_COLUMNS

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

SCHEMA = pa.schema([(name, pa.string()) for name in RECORD_COLUMNS])


class ParquetTableStore:
    """Reads and writes ABI record tables as Parquet files."""

    def __init__(self, compression: str = "snappy"):
        self.compression = compression

    def to_table(self, records: Sequence[AbiRecord]) -> pa.Table:
        return pa.Table.from_pylist([r.as_row() for r in records], schema=SCHEMA)

    def write_rows(self, records: Sequence[AbiRecord], path: PathLike) -> Path:
        path = Path(path)
        pq.write_table(self.to_table(records), path, compression=self.compression)
        logger.debug("Wrote %d rows to %s", len(records), path)
        return path

    def read_table(self, path: PathLike) -> pa.Table:
        return pq.read_table(path, schema=SCHEMA)

    def concat_files(self, input_paths: Iterable[PathLike], output_path: PathLike) -> Path:
        """File order first, then row order within each file. No dedup."""
        tables = [self.read_table(p) for p in input_paths]
        merged = pa.concat_tables(tables) if tables else SCHEMA.empty_table()
        output_path = Path(output_path)
        pq.write_table(merged, output_path, compression=self.compression)
        logger.debug("Merged %d files (%d rows) into %s", len(tables), merged.num_rows, output_path)
        return output_path


_default_store = ParquetTableStore()


def write_table(records: Sequence[AbiRecord], path: PathLike) -> Path:
    return _default_store.write_rows(records, path)


def merge_tables(input_paths: Iterable[PathLike], output_path: PathLike) -> Path:
    return _default_store.concat_files(input_paths, output_path)


def read_table(path: PathLike) -> List[AbiRecord]:
    """Load a table back into records (row order preserved)."""
    return [AbiRecord(**row) for row in _default_store.read_table(path).to_pylist()]
