"""LifeHistory

Normalize species life-history datasets for analysis.

LifeHistory started as the companion of a tutorial on manipulating
tabular data, which uses the PanTHERIA database of mammal traits
as its running example. Before any analysis can happen, the raw
file needs to be cleaned up:

* Column names carry numbering artifacts (``5-1_``) and
  namespace prefixes (``MSW05_``).
* Column names are CamelCase (``AdultBodyMass_g``) while
  lowercase names with underscores are easier to type.
* Missing measurements are marked with ``-999``.
* The species binomial name is in a column called ``Binomial``.

The package is constituted by multiple components, each isolated
within its own package and each self documented in literate programming style:

* The Compute Engine, whose nodes perform each normalization step.
* The Dataframe API, which provides an high level API for the compute engine.
* The Configuration, which captures the conventions of a dataset.

The quickest way to get a normalized :class:`pyarrow.Table` is::

    from lifehistory import load_dataset

    table = load_dataset("PanTHERIA_1-0_WR05_Aug2008.txt")
"""

from . import compute
from .compute import LoadError, NormalizerError, ParseError, SchemaError
from .config import NormalizerConfig, load_config
from .dataframe import Dataframe, load_dataset

__all__ = (
    "compute",
    "Dataframe",
    "load_dataset",
    "NormalizerConfig",
    "load_config",
    "NormalizerError",
    "LoadError",
    "ParseError",
    "SchemaError",
)
