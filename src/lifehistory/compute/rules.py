"""Rules applied to column names by the renaming nodes.

Raw datasets often come with headers that are
inconvenient to work with: numbering artifacts added by
the tool that exported the data, namespace prefixes
of the source the columns come from, CamelCase names
mixed with unit suffixes.

Each rule in this module knows how to rewrite
a single column name, the :class:`lifehistory.compute.renaming.RenameNode`
takes care of applying a list of rules to all the columns
of the data.

>>> rules = [PatternRule(r"^X?[0-9]+[-.][0-9]+_"), PatternRule("MSW05_"), RecaseRule()]
>>> name = "5-1_AdultBodyMass_g"
>>> for rule in rules:
...     name = rule.apply(name)
>>> name
'adult_body_mass_g'
"""

import re

from .base import NameRule


class PatternRule(NameRule):
    """Replace every match of a regular expression in the name.

    By default the matches are removed, which makes the rule
    suitable to strip noise like prefixes or numbering artifacts.

    >>> PatternRule("MSW05_").apply("MSW05_Binomial")
    'Binomial'
    >>> PatternRule("MSW05_").apply("LitterSize")
    'LitterSize'
    """

    def __init__(self, pattern: str | re.Pattern, replacement: str = "") -> None:
        """
        :param pattern: The regular expression to look for.
        :param replacement: What to replace the matches with.
        """
        self.pattern = re.compile(pattern)
        self.replacement = replacement

    def apply(self, name: str) -> str:
        return self.pattern.sub(self.replacement, name)

    def __str__(self) -> str:
        return f"PatternRule({self.pattern.pattern!r}, replacement={self.replacement!r})"


class RecaseRule(NameRule):
    """Convert CamelCase names to lowercase names separated by underscores.

    An underscore is inserted in front of each uppercase
    letter, unless it's the first character or it already
    follows an underscore, then the whole name is lowercased.

    >>> RecaseRule().apply("AdultHeadBodyLen_mm")
    'adult_head_body_len_mm'
    >>> RecaseRule().apply("Binomial")
    'binomial'
    """

    UPPERCASE_BOUNDARY = re.compile(r"(?<=[^_])(?=[A-Z])")

    def apply(self, name: str) -> str:
        name = self.UPPERCASE_BOUNDARY.sub("_", name).lower()
        return name.lstrip("_")

    def __str__(self) -> str:
        return "RecaseRule()"


class MappingRule(NameRule):
    """Rename columns to explicitly provided names.

    Names that are not part of the mapping are left untouched.

    >>> rule = MappingRule({"binomial": "species"})
    >>> rule.apply("binomial"), rule.apply("order")
    ('species', 'order')
    """

    def __init__(self, mapping: dict[str, str]) -> None:
        """
        :param mapping: The ``{old_name: new_name}`` renames to perform.
        """
        self.mapping = dict(mapping)

    def apply(self, name: str) -> str:
        return self.mapping.get(name, name)

    def __str__(self) -> str:
        return f"MappingRule({self.mapping})"


class RepeatedRule(NameRule):
    """Apply a sequence of rules until the name stops changing.

    Stripping a piece of noise can expose another one,
    like a numbering artifact hidden behind a prefix.
    Repeating the rules makes applying them twice
    the same as applying them once.

    >>> rule = RepeatedRule([PatternRule("MSW05_"), PatternRule(r"^X?[0-9]+[-.][0-9]+_")])
    >>> rule.apply("MSW05_5-1_AdultBodyMass_g")
    'AdultBodyMass_g'
    """

    MAX_ROUNDS = 100

    def __init__(self, rules: list[NameRule]) -> None:
        """
        :param rules: The rules to apply, in order, at each round.
        """
        self.rules = list(rules)

    def apply(self, name: str) -> str:
        for _ in range(self.MAX_ROUNDS):
            previous = name
            for rule in self.rules:
                name = rule.apply(name)
            if name == previous:
                return name
        raise ValueError(f"Rules {self} never settle on a name for {name!r}")

    def __str__(self) -> str:
        rules = ", ".join(map(str, self.rules))
        return f"RepeatedRule([{rules}])"
