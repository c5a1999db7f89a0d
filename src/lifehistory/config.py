"""Configuration of the dataset normalization.

The conventions used to clean up a dataset are specific
to the source it comes from: which prefixes to strip
from the headers, which value marks a missing measurement,
which columns deserve a clearer name.

The defaults match the PanTHERIA database of mammal
life-history traits. They can be overridden in code
or through environment variables (also read from a
local ``.env`` file)::

    LIFEHISTORY_NOISE_PATTERNS="^X?[0-9]+[-.][0-9]+_;MSW05_"
    LIFEHISTORY_SENTINEL=-999
    LIFEHISTORY_COLUMNS="order,species,adult_body_mass_g"
"""

import os
from dataclasses import dataclass, field

from dotenv import find_dotenv, load_dotenv

DEFAULT_NOISE_PATTERNS = (
    # Numbering like "5-1_" in front of the column name, or "X5.1_"
    # once R's read.table has mangled it.
    r"^X?[0-9]+[-.][0-9]+_",
    # Mammal Species of the World 2005 namespace.
    "MSW05_",
)

PANTHERIA_COLUMNS = [
    "order",
    "family",
    "genus",
    "species",
    "adult_body_mass_g",
    "adult_head_body_len_mm",
    "home_range_km2",
    "litter_size",
]


@dataclass
class NormalizerConfig:
    """How to normalize a life-history dataset."""

    noise_patterns: tuple[str, ...] = DEFAULT_NOISE_PATTERNS
    sentinel: int | float = -999
    renames: dict[str, str] = field(default_factory=lambda: {"binomial": "species"})
    # Normalized names of the columns to keep, None keeps them all.
    columns: list[str] | None = None


def load_config(**overrides) -> NormalizerConfig:
    """Load the configuration from the environment.

    Reads ``LIFEHISTORY_*`` variables from the environment
    or from a ``.env`` file found from the working directory.
    Explicit keyword arguments take precedence over the environment.
    """
    load_dotenv(find_dotenv(usecwd=True))

    settings = {}
    patterns = os.getenv("LIFEHISTORY_NOISE_PATTERNS")
    if patterns:
        settings["noise_patterns"] = tuple(p for p in patterns.split(";") if p)

    sentinel = os.getenv("LIFEHISTORY_SENTINEL")
    if sentinel:
        settings["sentinel"] = _parse_number(sentinel)

    columns = os.getenv("LIFEHISTORY_COLUMNS")
    if columns:
        settings["columns"] = [c.strip() for c in columns.split(",") if c.strip()]

    settings.update(overrides)
    return NormalizerConfig(**settings)


def _parse_number(value: str) -> int | float:
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"LIFEHISTORY_SENTINEL must be a number, got {value!r}") from None
