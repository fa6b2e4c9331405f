"""
Bulk dictionary import.

DictionaryImporter runs rows through the entry processor in batches. Rows
within a batch are independent, so a batch may be spread over a thread pool.
A row that fails is recorded in the result and the import carries on.
"""

import logging
import sqlite3
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Iterable, Iterator, Mapping, Optional, Sequence

from .core import LexiconProcessor, RowProcessingError
from .dictionaries import DictionaryConfig, get_dictionary_config
from .models import ImportProgress, ImportResult, ProcessedDictionaryWord

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 500
DEFAULT_MAX_WORKERS = 1

BatchSink = Callable[[list[ProcessedDictionaryWord]], None]
ProgressCallback = Callable[[ImportProgress], None]


class SqliteRowSource:
    """
    Reads the rows of one dictionary table from a SQLite file.

    Rows are ordered by `lnum` when the table has it, otherwise by the word
    field.
    """

    def __init__(self, path, dictionary, limit: Optional[int] = None):
        self.path = Path(path)
        self.config: DictionaryConfig = get_dictionary_config(dictionary)
        self.limit = limit

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        return conn

    def columns(self) -> list[str]:
        conn = self._connect()
        try:
            rows = conn.execute(f'PRAGMA table_info("{self.config.table_name}")').fetchall()
        finally:
            conn.close()
        return [row["name"] for row in rows]

    def count(self) -> int:
        conn = self._connect()
        try:
            (total,) = conn.execute(f'SELECT COUNT(*) FROM "{self.config.table_name}"').fetchone()
        finally:
            conn.close()
        if self.limit is not None:
            return min(total, self.limit)
        return total

    def _query(self) -> str:
        order_field = "lnum" if "lnum" in self.columns() else self.config.word_field
        sql = f'SELECT * FROM "{self.config.table_name}" ORDER BY "{order_field}"'
        if self.limit is not None:
            sql += f" LIMIT {int(self.limit)}"
        return sql

    def __iter__(self) -> Iterator[dict]:
        conn = self._connect()
        try:
            for row in conn.execute(self._query()):
                yield dict(row)
        finally:
            conn.close()


def _batches(rows: Iterable[Mapping], size: int) -> Iterator[list[Mapping]]:
    batch = []
    for row in rows:
        batch.append(row)
        if len(batch) >= size:
            yield batch
            batch = []
    if batch:
        yield batch


class DictionaryImporter:
    """
    Imports the rows of one dictionary.

    Args:
        dictionary: Dictionary name or DictionaryName member.
        batch_size: Rows per batch.
        max_workers: Threads used within a batch; 1 processes sequentially.
        validate: Check each row's columns before processing it.
        progress_callback: Receives an ImportProgress after every batch.

    Raises:
        UnknownDictionaryError: If the dictionary is not supported.
    """

    def __init__(
        self,
        dictionary,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_workers: int = DEFAULT_MAX_WORKERS,
        validate: bool = False,
        progress_callback: Optional[ProgressCallback] = None,
        include_markup: bool = False,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")

        self.config = get_dictionary_config(dictionary)
        self.batch_size = batch_size
        self.max_workers = max_workers
        self.validate = validate
        self.progress_callback = progress_callback
        self.include_markup = include_markup

    def run(
        self,
        rows: Iterable[Mapping],
        sink: Optional[BatchSink] = None,
        total: Optional[int] = None,
        columns: Optional[Sequence[str]] = None,
    ) -> ImportResult:
        """
        Process all rows.

        Args:
            rows: Row mappings in dictionary order.
            sink: Receives each batch of processed entries.
            total: Expected number of rows, for progress reporting.
            columns: Column names of the source table.

        Returns:
            The import summary.
        """
        name = self.config.name.value
        processor = LexiconProcessor(
            self.config.name, include_markup=self.include_markup, columns=columns
        )
        if total is None and isinstance(rows, Sequence):
            total = len(rows)

        result = ImportResult(dictionary=name)
        started = time.monotonic()
        logger.info("Importing dictionary '%s' (batch size %d)", name, self.batch_size)

        next_index = 1
        for batch_number, batch in enumerate(_batches(rows, self.batch_size), start=1):
            entries = self._process_batch(processor, batch, next_index, result)
            next_index += len(batch)
            result.total_rows += len(batch)
            result.processed_rows += len(entries)

            if sink is not None:
                sink(entries)

            progress = ImportProgress(
                dictionary=name,
                batch_number=batch_number,
                processed=result.total_rows,
                total=total if total is not None else result.total_rows,
                errors=len(result.errors),
            )
            logger.info(
                "Batch %d of '%s': %d/%d rows (%.1f%%)",
                batch_number, name, progress.processed, progress.total, progress.percent,
            )
            if self.progress_callback is not None:
                self.progress_callback(progress)

        result.duration_seconds = round(time.monotonic() - started, 3)
        logger.info(
            "Finished '%s': %d processed, %d invalid, %d errors in %.2fs",
            name, result.processed_rows, result.invalid_rows,
            len(result.errors), result.duration_seconds,
        )
        return result

    def _process_batch(
        self,
        processor: LexiconProcessor,
        batch: list[Mapping],
        first_index: int,
        result: ImportResult,
    ) -> list[ProcessedDictionaryWord]:
        indexed = list(enumerate(batch, start=first_index))
        outcomes: dict[int, tuple] = {}

        if self.max_workers == 1:
            for word_index, row in indexed:
                outcomes[word_index] = self._process_one(processor, row, word_index)
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = {
                    executor.submit(self._process_one, processor, row, word_index): word_index
                    for word_index, row in indexed
                }
                for future in as_completed(futures):
                    outcomes[futures[future]] = future.result()

        entries = []
        for word_index in sorted(outcomes):
            entry, error, invalid = outcomes[word_index]
            # valid_rows counts rows that passed validation and processed cleanly.
            if invalid:
                result.invalid_rows += 1
            elif error is None:
                result.valid_rows += 1
            if error is not None:
                logger.warning("Skipping %s", error)
                result.errors.append(str(error))
                continue
            entries.append(entry)
        return entries

    def _process_one(
        self,
        processor: LexiconProcessor,
        row: Mapping,
        word_index: int,
    ) -> tuple[Optional[ProcessedDictionaryWord], Optional[RowProcessingError], bool]:
        """Process one row into (entry, error, failed_validation)."""
        if self.validate:
            validation = processor.validate(row)
            if not validation.is_valid:
                return None, RowProcessingError(word_index, "; ".join(validation.errors)), True
        try:
            return processor.process(row, word_index), None, False
        except Exception as e:
            return None, RowProcessingError(word_index, str(e)), False
