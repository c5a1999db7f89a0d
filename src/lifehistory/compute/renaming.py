"""Query plan nodes that rename columns.

Most of the work in making a raw dataset usable
goes into its headers: removing noise from the names,
adopting a consistent casing and giving clearer names
to the columns that need one.

This module implements the renaming node,
which applies :mod:`lifehistory.compute.rules` to the columns.
"""

import logging

import pyarrow as pa

from .base import NameRule, QueryPlanNode, SchemaError

logger = logging.getLogger(__name__)


class RenameNode(QueryPlanNode):
    """Rename all columns by applying a list of rules.

    The rules are applied in order to each column name,
    the output of a rule is the input of the next one.
    The data itself and the order of rows and columns
    are left untouched.

    >>> import pyarrow as pa
    >>> from lifehistory.compute import MappingRule, PyArrowTableDataSource, RecaseRule
    >>> data = pa.record_batch({"AdultBodyMass_g": [1.5], "LitterSize": [2]})
    >>> next(RenameNode([RecaseRule()], PyArrowTableDataSource(data)).batches()).schema.names
    ['adult_body_mass_g', 'litter_size']

    When a renamed column takes the name of a column that
    was not renamed, the plan fails with a :class:`SchemaError`,
    unless ``replace=True``, in which case the renamed column
    takes the place of the other one:

    >>> data = pa.record_batch({"species": ["mysticetus"], "binomial": ["Balaena mysticetus"]})
    >>> rule = MappingRule({"binomial": "species"})
    >>> next(RenameNode([rule], PyArrowTableDataSource(data), replace=True).batches()).to_pydict()
    {'species': ['Balaena mysticetus']}
    """

    def __init__(
        self, rules: list[NameRule], child: QueryPlanNode, replace: bool = False
    ) -> None:
        """
        :param rules: The rules to apply to each column name.
        :param child: The node emitting the data to be renamed.
        :param replace: Drop columns whose name is taken by a renamed column.
        """
        self.rules = list(rules)
        self.child = child
        self.replace = replace

    def __str__(self) -> str:
        rules = ", ".join(map(str, self.rules))
        return f"RenameNode(rules=[{rules}], child={self.child})"

    def rename(self, name: str) -> str:
        """Apply all the rules to a single column name."""
        for rule in self.rules:
            name = rule.apply(name)
        return name

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Apply the renaming to the child node.

        The new names are computed once, from the first batch,
        as all batches share the same schema.

        Raises :class:`SchemaError` if two columns would end up
        with the same name.
        """
        plan = None
        for batch in self.child.batches():
            if plan is None:
                plan = self.plan_columns(batch.schema.names)
            indices, names = plan
            yield pa.RecordBatch.from_arrays(
                [batch.column(i) for i in indices], names=names
            )

    def plan_columns(self, old_names: list[str]) -> tuple[list[int], list[str]]:
        """Compute which columns to keep and their new names.

        When ``replace`` is enabled, a column that the rules leave
        untouched is dropped if a renamed column takes its name.
        """
        new_names = [self.rename(name) for name in old_names]
        renamed = {new for old, new in zip(old_names, new_names) if new != old}

        indices, names = [], []
        for index, (old_name, name) in enumerate(zip(old_names, new_names)):
            if self.replace and name == old_name and name in renamed:
                logger.warning("Column %r replaced by a renamed column", name)
                continue
            if name in names:
                raise SchemaError(
                    f"Renaming {old_name!r} leads to duplicate column {name!r}", name
                )
            if name != old_name:
                logger.debug("Renaming column %r to %r", old_name, name)
            indices.append(index)
            names.append(name)
        return indices, names
