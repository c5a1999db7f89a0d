"""Query plan nodes that implement selection of columns.

Raw datasets frequently carry many more columns
than an analysis needs. Restricting the data to
the interesting ones makes the following steps
easier to follow.

This module implements the basic column selection capabilities.
"""

import pyarrow as pa

from .base import QueryPlanNode, SchemaError


class SelectNode(QueryPlanNode):
    """Keep only the requested columns, in the requested order.

    All the requested columns must exist in the data,
    otherwise a :class:`lifehistory.compute.SchemaError` is raised.

    >>> import pyarrow as pa
    >>> from lifehistory.compute import PyArrowTableDataSource
    >>> data = pa.record_batch({"a": [1, 2, 3], "b": [4, 5, 6], "c": [7, 8, 9]})
    >>> next(SelectNode(["c", "a"], PyArrowTableDataSource(data)).batches()).to_pydict()
    {'c': [7, 8, 9], 'a': [1, 2, 3]}

    When a later step of the plan is going to rename a column,
    ``aliases`` allows to request it by its final name.
    The aliased column is preferred whenever it exists:

    >>> data = pa.record_batch({"species": ["mysticetus"], "binomial": ["Balaena mysticetus"]})
    >>> next(SelectNode(["species"], PyArrowTableDataSource(data),
    ...                 aliases={"species": "binomial"}).batches()).to_pydict()
    {'binomial': ['Balaena mysticetus']}
    """

    def __init__(
        self,
        columns: list[str],
        child: QueryPlanNode,
        aliases: dict[str, str] | None = None,
    ) -> None:
        """
        :param columns: The names of the columns to keep.
        :param child: The node emitting the data to select from.
        :param aliases: The ``{requested_name: column_name}`` alternatives
                        to look for before the requested names.
        """
        if isinstance(columns, str) or len(set(columns)) != len(columns):
            raise ValueError("Columns must be a list of unique column names")

        self.columns = list(columns)
        self.child = child
        self.aliases = dict(aliases or {})

    def __str__(self) -> str:
        return f"SelectNode(columns={self.columns}, aliases={self.aliases}, child={self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Apply the selection to the child node.

        The columns are resolved on the first batch,
        before any data is emitted.
        """
        selected = None
        for batch in self.child.batches():
            if selected is None:
                selected = self.resolve_columns(batch.schema)
            yield batch.select(selected)

    def resolve_columns(self, schema: pa.Schema) -> list[str]:
        """Find the names of the columns to select in the schema."""
        selected = []
        for column in self.columns:
            alias = self.aliases.get(column)
            if alias is not None and alias in schema.names:
                selected.append(alias)
            elif column in schema.names:
                selected.append(column)
            else:
                raise SchemaError(f"Column {column!r} does not exist", column)
        return selected
