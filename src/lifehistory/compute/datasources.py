"""Query Plan nodes that load data

The datasource nodes are expected to fetch the data from some source,
convert it into Arrow format and forward it
to the next node in the plan.

Life-history datasets like PanTHERIA are distributed
as tab separated text files, one record per line,
with the first line holding the column names.
"""

import logging
from abc import abstractmethod
from contextlib import contextmanager
from typing import Iterator

import pyarrow as pa
import pyarrow.csv

from .base import NormalizerError, QueryPlanNode

logger = logging.getLogger(__name__)


class DataSourceNode(QueryPlanNode):
    """Base class for nodes that load data from a source."""

    @abstractmethod
    def poll_schema(self) -> pa.Schema:
        """Poll the schema of the data source without loading its content."""
        ...


class TSVDataSource(DataSourceNode):
    """Load data from a tab separated text file.

    Given a local file path, load the content,
    convert it into Arrow format, and emit it
    for the next nodes of the plan to consume.

    The whole file is read at once, so that column types
    are inferred looking at all the rows and not only
    at the first block of the file.
    Fields are taken literally: quote characters
    have no special meaning.

    >>> import tempfile
    >>> with tempfile.NamedTemporaryFile("w", suffix=".txt", delete=False) as f:
    ...     _ = f.write("MSW05_Order\\tLitterSize\\nCarnivora\\t-999\\n")
    >>> next(TSVDataSource(f.name).batches()).to_pydict()
    {'MSW05_Order': ['Carnivora'], 'LitterSize': [-999]}
    """

    def __init__(self, filename: str, delimiter: str = "\t") -> None:
        """
        :param filename: The path of the local text file.
        :param delimiter: The character separating fields.
        """
        self.filename = str(filename)
        self.delimiter = delimiter

    def __str__(self) -> str:
        return f"TSVDataSource({self.filename}, delimiter={self.delimiter!r})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Read the file and emit its batches."""
        yield from _table_batches(self.read())

    def poll_schema(self) -> pa.Schema:
        """Poll the schema of the file without loading its whole content.

        Only the first block of the file is parsed, so the
        column types are inferred from the rows it contains.
        """
        with self.reading():
            with pa.csv.open_csv(
                self.filename, parse_options=self.parse_options()
            ) as reader:
                return reader.schema

    def read(self) -> pa.Table:
        """Read the whole file into a :class:`pyarrow.Table`.

        Raises :class:`LoadError` when the file can't be opened
        and :class:`ParseError` when its content is malformed.
        """
        with self.reading():
            with open(self.filename, "rb") as f:
                table = pa.csv.read_csv(f, parse_options=self.parse_options())

        logger.info(
            "Loaded %d rows and %d columns from %s",
            table.num_rows,
            table.num_columns,
            self.filename,
        )
        return table

    def parse_options(self) -> pa.csv.ParseOptions:
        return pa.csv.ParseOptions(delimiter=self.delimiter, quote_char=False)

    @contextmanager
    def reading(self) -> Iterator[None]:
        """Turn failures while reading the file into loading errors."""
        try:
            yield
        except OSError as e:
            raise LoadError(f"Unable to read {self.filename}: {e}", self.filename) from e
        except pa.ArrowInvalid as e:
            line_number = self.find_malformed_line()
            location = f" at line {line_number}" if line_number else ""
            raise ParseError(
                f"Malformed data in {self.filename}{location}: {e}",
                self.filename,
                line_number,
            ) from e

    def find_malformed_line(self) -> int | None:
        """Look for the first line with a different number of fields than the header.

        Used when loading fails, to locate the offending line.
        Returns the 1-based line number, the header being line 1,
        or ``None`` if every line has the right amount of fields.
        """
        expected = None
        with open(self.filename, "rb") as f:
            for line_number, line in enumerate(f, start=1):
                line = line.rstrip(b"\r\n")
                if not line:
                    continue
                fields = line.count(self.delimiter.encode()) + 1
                if expected is None:
                    expected = fields
                elif fields != expected:
                    return line_number
        return None


class PyArrowTableDataSource(DataSourceNode):
    """Load data from an in-memory pyarrow.Table or pyarrow.RecordBatch.

    Given a :class:`pyarrow.Table` or `pyarrow.RecordBatch` object,
    allow to use its data in a normalization plan.
    """

    def __init__(self, table: pa.Table | pa.RecordBatch) -> None:
        """
        :param table: The table or recordbatch with the data to read.
        """
        self.table = table
        self.is_recordbatch = isinstance(table, pa.RecordBatch)

    def __str__(self) -> str:
        return f"PyArrowTableDataSource(columns={self.table.column_names}, rows={self.table.num_rows})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Emit the data contained in the Table for consumption by other node."""
        if self.is_recordbatch:
            yield self.table
        else:
            yield from _table_batches(self.table)

    def poll_schema(self) -> pa.Schema:
        """Poll the schema of the Table."""
        return self.table.schema


def _table_batches(table: pa.Table) -> QueryPlanNode.RecordBatchesGenerator:
    """Emit the batches of a table, or an empty one if it has no rows."""
    batches = table.to_batches()
    if not batches:
        batches = [pa.RecordBatch.from_pylist([], schema=table.schema)]
    yield from batches


class LoadError(NormalizerError):
    """The data source could not be read."""

    def __init__(self, message: str, filename: str) -> None:
        """
        :param message: Description of the problem.
        :param filename: The path that could not be read.
        """
        super().__init__(message)
        self.filename = filename


class ParseError(NormalizerError):
    """The data source content is malformed.

    When the problem is a row with the wrong number of fields,
    ``line_number`` holds the 1-based line where it was found.
    """

    def __init__(
        self, message: str, filename: str, line_number: int | None = None
    ) -> None:
        """
        :param message: Description of the problem.
        :param filename: The path of the malformed file.
        :param line_number: The offending line, if known.
        """
        super().__init__(message)
        self.filename = filename
        self.line_number = line_number
