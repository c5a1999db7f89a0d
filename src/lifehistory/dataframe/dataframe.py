"""The Dataframe object itself."""
import logging
from typing import Self

import pyarrow as pa

from ..compute import (
    MappingRule,
    PatternRule,
    PyArrowTableDataSource,
    RecaseRule,
    RecodeNode,
    RenameNode,
    RepeatedRule,
    SelectNode,
    TSVDataSource,
)
from ..compute.base import QueryPlanNode
from ..config import DEFAULT_NOISE_PATTERNS, NormalizerConfig

logger = logging.getLogger(__name__)


class Dataframe:
  """Data structure that handles data in rows and columns.

  The Dataframe object allows to represent in-memory data
  and perform the normalization steps over it.

  The lifehistory dataframe object is lazy, which means that
  any transformation will be applied only when the
  ``.collect()`` method will be invoked and no data is kept
  in memory until that moment (unless it already was).

  Each method returns a new Dataframe, so the steps can be chained:

  >>> import pyarrow as pa
  >>> data = pa.table({"MSW05_Binomial": ["Panthera leo"], "LitterSize": [-999]})
  >>> Dataframe(data).strip_header_noise().recase_headers().rename({"binomial": "species"}).column_names
  ['species', 'litter_size']
  """
  def __init__(self, node_or_table: QueryPlanNode|pa.Table|pa.RecordBatch) -> None:
    """
    :param node_or_table: A compute engine node expected to emit
                          the data for the dataframe or a `pyarrow.Table`.
    """
    if isinstance(node_or_table, (pa.Table, pa.RecordBatch)):
      node_or_table = PyArrowTableDataSource(node_or_table)

    if not isinstance(node_or_table, QueryPlanNode):
      raise ValueError("Invalid input, expected a QueryPlanNode or a PyArrow Table")

    self.node = node_or_table

  def __str__(self) -> str:
    return f"Dataframe({self.node})"

  @classmethod
  def open_tsv(cls, filename: str) -> Self:
    """Open a tab separated text file and create a Dataframe out of its data.

    :param filename: The path to a local text file with a header row.
    """
    return cls(TSVDataSource(filename))

  def strip_header_noise(self, patterns: tuple[str, ...] = DEFAULT_NOISE_PATTERNS) -> Self:
    """Remove every match of the noise patterns from the column names.

    :param patterns: The regular expressions matching the noise,
                     by default numbering artifacts and the ``MSW05_`` prefix.
    """
    rules = [PatternRule(pattern) for pattern in patterns]
    return self.__class__(RenameNode([RepeatedRule(rules)], self.node))

  def select(self, columns: list[str], aliases: dict[str, str] | None = None) -> Self:
    """Keep only the given columns, in the given order.

    :param columns: The names of the columns to keep.
    :param aliases: Columns to prefer, by requested name,
                    see :class:`lifehistory.compute.SelectNode`.
    """
    return self.__class__(SelectNode(columns, self.node, aliases=aliases))

  def recase_headers(self) -> Self:
    """Convert column names from CamelCase to lowercase with underscores."""
    return self.__class__(RenameNode([RecaseRule()], self.node))

  def recode_missing(self, sentinel: int | float = -999) -> Self:
    """Replace the sentinel value with nulls in all columns.

    :param sentinel: The value marking missing measurements.
    """
    return self.__class__(RecodeNode(sentinel, self.node))

  def rename(self, mapping: dict[str, str]) -> Self:
    """Rename columns, names not in the mapping are kept as they are.

    A column already called like one of the new names is replaced
    by the renamed column.

    :param mapping: The ``{old_name: new_name}`` renames to perform.
    """
    return self.__class__(RenameNode([MappingRule(mapping)], self.node, replace=True))

  def normalize(self, config: NormalizerConfig | None = None) -> Self:
    """Apply all the normalization steps.

    Strips noise from the headers, recases them,
    keeps the configured columns, recodes the missing
    values sentinel and renames the identifier columns.

    The configured columns are expressed with their final names,
    so the selection looks for the columns that are going to be
    renamed first, and applying ``normalize`` to already normalized
    data leaves it unchanged.

    :param config: The normalization conventions, defaults to PanTHERIA ones.
    """
    config = config or NormalizerConfig()
    logger.debug("Normalizing %s with %s", self.node, config)

    df = self.strip_header_noise(config.noise_patterns).recase_headers()
    if config.columns is not None:
      aliases = {new: old for old, new in config.renames.items()}
      df = df.select(config.columns, aliases=aliases)
    return df.recode_missing(config.sentinel).rename(config.renames)

  @property
  def column_names(self) -> list[str]:
    """The names of the columns, computing them requires running the plan."""
    return next(self.node.batches()).schema.names

  def collect(self) -> Self:
    """Collect all data of the dataframe in memory.

    Returns a new Dataframe that has all data from the
    previous dataframe eagerly loaded in memory.
    """
    return self.__class__(self.to_arrow())

  def to_arrow(self) -> pa.Table:
    """Collect all the data and return a pyarrow.Table"""
    return pa.Table.from_batches(list(self.node.batches()))


def load_dataset(filename: str, config: NormalizerConfig | None = None) -> pa.Table:
  """Load and normalize a life-history dataset.

  The result is a :class:`pyarrow.Table` ready to be analysed
  with the pyarrow Table methods and :mod:`pyarrow.compute` functions.

  :param filename: The path to a local tab separated text file.
  :param config: The normalization conventions, defaults to PanTHERIA ones.
  """
  return Dataframe.open_tsv(filename).normalize(config).to_arrow()
