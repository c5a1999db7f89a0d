from lifehistory.compute import (
    PatternRule,
    RecaseRule,
    RecodeNode,
    RenameNode,
    RepeatedRule,
    SelectNode,
    TSVDataSource,
)

query = RecodeNode(
    -999,
    SelectNode(
        ["binomial", "adult_head_body_len_mm", "home_range_km2"],
        RenameNode(
            [
                RepeatedRule([PatternRule(r"^X?[0-9]+[-.][0-9]+_"), PatternRule("MSW05_")]),
                RecaseRule(),
            ],
            TSVDataSource("data/pantheria-sample.txt"),
        ),
    ),
)
print(query)
for batch in query.batches():
    print("---")
    print(batch)
