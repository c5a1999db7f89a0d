"""The LifeHistory normalization engine

The engine defines the in-memory format for normalization
plans and the plan nodes supported.

The engine is tightly bound to Apache Arrow,
thus the nodes will expect to always deal with
:class:`pyarrow.RecordBatch` and emit a new RecordBatch
as the result of the node execution.

This allows to easily build pipelines like::

    (RecordBatch)-->Node1--(RecordBatch)-->Node2--(RecordBatch)-->...

The plan nodes themselves are in charge of their execution,
this keeps the behavior near to the node and thus makes easy to
know how a Node is actually executed without having to look around too much.

Building a plan requires to combine the nodes that we want
to be executed starting with a ``DataSource`` node as the
leaf node of the plan:

>>> import pyarrow as pa
>>> data = pa.table({
...    "MSW05_Binomial": pa.array(["Balaena mysticetus", "Panthera leo"]),
...    "LitterSize": pa.array([1.0, -999.0])
... })
>>>
>>> from lifehistory.compute import PyArrowTableDataSource, RecodeNode
>>> from lifehistory.compute import RenameNode, PatternRule, RecaseRule
>>> plan = RecodeNode(
...     -999,
...     child=RenameNode(
...         [PatternRule("MSW05_"), RecaseRule()],
...         child=PyArrowTableDataSource(data)
...     )
... )
>>> for batch in plan.batches():
...     print(batch.to_pydict())
{'binomial': ['Balaena mysticetus', 'Panthera leo'], 'litter_size': [1.0, None]}
"""

from .base import NameRule, NormalizerError, QueryPlanNode, SchemaError
from .datasources import LoadError, ParseError, PyArrowTableDataSource, TSVDataSource
from .recoding import RecodeNode
from .renaming import RenameNode
from .rules import MappingRule, PatternRule, RecaseRule, RepeatedRule
from .selection import SelectNode

__all__ = (
    "TSVDataSource",
    "PyArrowTableDataSource",
    "QueryPlanNode",
    "NameRule",
    "RenameNode",
    "SelectNode",
    "RecodeNode",
    "PatternRule",
    "RecaseRule",
    "MappingRule",
    "RepeatedRule",
    "NormalizerError",
    "LoadError",
    "ParseError",
    "SchemaError",
)
