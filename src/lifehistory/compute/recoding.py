"""Query plan nodes that recode missing values.

Many scientific datasets predate a standard way
to represent missing measurements in text files,
and use a sentinel value instead. PanTHERIA for
example marks unknown values with ``-999``.

Left as is, the sentinel would be treated as a real
measurement and would skew every mean or minimum computed
on the data. This module replaces it with Arrow nulls,
which every compute function knows how to skip.
"""

import logging
import re

import pyarrow as pa
import pyarrow.compute as pc

from .base import QueryPlanNode

logger = logging.getLogger(__name__)


class RecodeNode(QueryPlanNode):
    """Replace a sentinel value with nulls in all columns.

    Numeric columns are compared numerically with the sentinel,
    while text columns are compared with its textual forms,
    so both ``-999`` and ``-999.00`` are recognised.
    The type of each column is preserved.

    >>> import pyarrow as pa
    >>> from lifehistory.compute import PyArrowTableDataSource
    >>> data = pa.record_batch({"litter_size": [2.0, -999.0], "order": ["Carnivora", "-999"]})
    >>> next(RecodeNode(-999, PyArrowTableDataSource(data)).batches()).to_pydict()
    {'litter_size': [2.0, None], 'order': ['Carnivora', None]}
    """

    def __init__(self, sentinel: int | float, child: QueryPlanNode) -> None:
        """
        :param sentinel: The value that marks missing measurements.
        :param child: The node emitting the data to be recoded.
        """
        self.sentinel = sentinel
        self.child = child
        self.text_pattern = sentinel_text_pattern(sentinel)

    def __str__(self) -> str:
        return f"RecodeNode(sentinel={self.sentinel}, child={self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Apply the recoding to each column of the batches emitted by the child."""
        for batch in self.child.batches():
            columns = [
                self.recode(name, column)
                for name, column in zip(batch.schema.names, batch.columns)
            ]
            yield pa.RecordBatch.from_arrays(columns, schema=batch.schema)

    def recode(self, name: str, column: pa.Array) -> pa.Array:
        """Replace the sentinel with null in a single column."""
        if pa.types.is_integer(column.type) or pa.types.is_floating(column.type):
            mask = pc.equal(column, self.sentinel)
        elif pa.types.is_string(column.type) or pa.types.is_large_string(column.type):
            mask = pc.match_substring_regex(column, self.text_pattern)
        else:
            return column

        mask = pc.fill_null(mask, False)
        found = pc.sum(mask).as_py() or 0
        if not found:
            return column

        logger.debug("Recoding %d sentinel values in column %r", found, name)
        return pc.if_else(mask, pa.scalar(None, type=column.type), column)


def sentinel_text_pattern(sentinel: int | float) -> str:
    """Regular expression matching the textual forms of the sentinel.

    >>> re.match(sentinel_text_pattern(-999), " -999.00") is not None
    True
    """
    if float(sentinel).is_integer():
        text = re.escape(str(int(sentinel))) + r"(\.0*)?"
    else:
        text = re.escape(str(sentinel)) + "0*"
    return rf"^\s*{text}\s*$"
