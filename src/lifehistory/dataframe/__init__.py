"""Dataframe API built on top of the lifehistory engine.

A dataframe library is a tool designed to handle and manipulate structured data,
typically in the form of tables (i.e., rows and columns).

Raw datasets rarely come in a shape that is convenient to analyse:
headers carry numbering artifacts and namespace prefixes,
names mix CamelCase with unit suffixes and missing measurements
are marked with magic numbers.

The :class:`Dataframe` exposes each cleanup step as a method,
so that the steps can be chained and applied lazily::

    df = Dataframe.open_tsv("PanTHERIA_1-0_WR05_Aug2008.txt") \\
      .strip_header_noise() \\
      .recase_headers() \\
      .recode_missing(-999) \\
      .rename({"binomial": "species"}) \\
      .collect()

The whole sequence is also available as :meth:`Dataframe.normalize`
and :func:`load_dataset`. Once normalized, the data is a plain
:class:`pyarrow.Table` which can be filtered, sorted and aggregated
using the Arrow APIs.
"""

from .dataframe import Dataframe, load_dataset

__all__ = ("Dataframe", "load_dataset")
