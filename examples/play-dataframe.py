import logging

import pyarrow.compute as pc

from lifehistory import Dataframe, NormalizerConfig
from lifehistory.config import PANTHERIA_COLUMNS

logging.basicConfig(level=logging.DEBUG)

table = Dataframe.open_tsv("data/pantheria-sample.txt") \
  .normalize(NormalizerConfig(columns=PANTHERIA_COLUMNS)) \
  .to_arrow()

print(table)

# From here on the analysis is plain Arrow.
carnivores = table.filter(pc.equal(table["order"], "Carnivora"))
print(carnivores.sort_by([("adult_body_mass_g", "descending")]).select(["species", "adult_body_mass_g"]))

print(table.group_by("order").aggregate([("litter_size", "mean"), ("species", "count")]))
