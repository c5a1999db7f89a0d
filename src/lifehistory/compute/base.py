"""Base classes and interfaces for the normalization engine

This module defines the base components that are
necessary to represent a normalization plan and execute it.
"""

import abc
from typing import Iterator

import pyarrow as pa


class QueryPlanNode(abc.ABC):
    """A node of a normalization plan.

    The plan is represented as a chain of nodes.
    Each node is a step in the normalization
    and the previous step is the child of the next one.

    For example a simple plan might involve
    loading data and recasing its headers::

        TSVDataSource -> RenameNode([RecaseRule()])

    That would be a plan where the last step
    is recasing, and the TSVDataSource is the child
    of the rename node.

    Each Node accepts :class:`pyarrow.RecordBatch`
    data as its input and emits a new
    :class:`pyarrow.RecordBatch` as its output.

    The base `QueryPlanNode` class does nothing
    and purely acts as the interface that all nodes
    must implement. Actual work will be done
    in the subclasses.

    For example a simple node that takes data
    and just forwards it as is after printing
    its headers can be implemented as::

        class DebugHeadersNode(QueryPlanNode):
            def __init__(self, child):
                self.child = child

            def batches(self):
                for b in self.child.batches():
                    print(b.schema.names)
                    yield b

            def __str__(self):
                return f"DebugHeadersNode()"
    """

    RecordBatchesGenerator = Iterator[pa.RecordBatch]

    @abc.abstractmethod
    def batches(self) -> RecordBatchesGenerator:
        """Emits the batches for the next node.

        Each node is expected to be able to
        generate data that has to be provided to the next
        node in the plan.

        Usually this happens by consuming data from its
        child node, transforming it somehow, and yielding
        it back to the next consumer.

        Nodes always emit at least one batch, even when
        there are no rows, so that the column names
        travel through the whole plan.
        """
        ...

    @abc.abstractmethod
    def __str__(self) -> str:
        """Human readable representation of the node."""
        ...


class NameRule(abc.ABC):
    """Rule rewriting a column name.

    Rules are the header equivalent of an expression:
    given the name of a column, they return the name
    the column should have after the rule is applied.

    Rules must be pure functions of the name,
    so that applying them to the same header
    always leads to the same result.

    A rule that uppercases names might look like::

        class UpperRule(NameRule):
            def apply(self, name):
                return name.upper()

            def __str__(self):
                return "UpperRule()"
    """

    @abc.abstractmethod
    def apply(self, name: str) -> str:
        """Return the rewritten column name."""
        ...

    @abc.abstractmethod
    def __str__(self) -> str:
        """Human readable representation of the rule."""
        ...


class NormalizerError(Exception):
    """Base class for errors raised while normalizing a dataset."""

    pass


class SchemaError(NormalizerError):
    """The columns of the data don't match what was requested.

    Raised when a requested column does not exist
    or when renaming would lead to two columns with the same name.
    """

    def __init__(self, message: str, column: str) -> None:
        """
        :param message: Description of the problem.
        :param column: The column name that caused the error.
        """
        super().__init__(message)
        self.column = column
