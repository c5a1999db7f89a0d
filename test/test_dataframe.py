import re
from pathlib import Path

import pyarrow as pa
import pyarrow.compute as pc
import pytest

from lifehistory import (
    Dataframe,
    LoadError,
    NormalizerConfig,
    ParseError,
    SchemaError,
    load_dataset,
)
from lifehistory.compute import PyArrowTableDataSource
from lifehistory.config import PANTHERIA_COLUMNS

HEADER = [
    "MSW05_Order",
    "MSW05_Binomial",
    "AdultBodyMass_g",
    "AdultHeadBodyLen_mm",
    "HomeRange_km2",
    "LitterSize",
]

NORMALIZED_HEADER = [
    "order",
    "species",
    "adult_body_mass_g",
    "adult_head_body_len_mm",
    "home_range_km2",
    "litter_size",
]


def write_tsv(path, header, rows):
    lines = ["\t".join(header)] + ["\t".join(row) for row in rows]
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture
def balaena_file(tmp_path):
    return write_tsv(
        tmp_path / "balaena.txt",
        HEADER,
        [["Carnivora", "Balaena mysticetus", "100000", "1500", "10", "-999"]],
    )


@pytest.fixture
def pantheria_file(tmp_path):
    header = [
        "MSW05_Order",
        "MSW05_Family",
        "MSW05_Genus",
        "MSW05_Species",
        "MSW05_Binomial",
        "5-1_AdultBodyMass_g",
        "13-1_AdultHeadBodyLen_mm",
        "22-1_HomeRange_km2",
        "15-1_LitterSize",
    ]
    rows = [
        ["Artiodactyla", "Camelidae", "Camelus", "dromedarius", "Camelus dromedarius",
         "492714.47", "-999.00", "196.32", "0.98"],
        ["Carnivora", "Felidae", "Panthera", "leo", "Panthera leo",
         "158623.93", "1778.11", "138.99", "2.72"],
        ["Carnivora", "Canidae", "Canis", "lupus", "Canis lupus",
         "31756.51", "1051.50", "159.86", "5.43"],
        ["Cetacea", "Balaenidae", "Balaena", "mysticetus", "Balaena mysticetus",
         "100000000.00", "-999.00", "-999.00", "1.00"],
    ]
    return write_tsv(tmp_path / "pantheria.txt", header, rows)


def test_end_to_end(balaena_file):
    table = Dataframe.open_tsv(balaena_file).normalize().to_arrow()
    assert table.column_names == NORMALIZED_HEADER
    assert table.num_rows == 1
    assert [table.column(name)[0].as_py() for name in NORMALIZED_HEADER] == [
        "Carnivora",
        "Balaena mysticetus",
        100000,
        1500,
        10,
        None,
    ]


def test_load_dataset(balaena_file):
    table = load_dataset(balaena_file)
    assert isinstance(table, pa.Table)
    assert table.column_names == NORMALIZED_HEADER


def test_chained_steps(balaena_file):
    df = (
        Dataframe.open_tsv(balaena_file)
        .strip_header_noise()
        .select(["Order", "Binomial", "LitterSize"])
        .recase_headers()
        .recode_missing(-999)
        .rename({"binomial": "species"})
    )
    assert df.to_arrow().to_pydict() == {
        "order": ["Carnivora"],
        "species": ["Balaena mysticetus"],
        "litter_size": [None],
    }


def test_normalize_is_idempotent(pantheria_file):
    config = NormalizerConfig(columns=["order", "species", "adult_body_mass_g", "litter_size"])
    once = Dataframe.open_tsv(pantheria_file).normalize(config).to_arrow()
    twice = Dataframe(once).normalize(config).to_arrow()
    assert twice.equals(once)

    all_columns = Dataframe.open_tsv(pantheria_file).normalize(NormalizerConfig(renames={})).collect()
    again = all_columns.normalize(NormalizerConfig(renames={})).to_arrow()
    assert again.equals(all_columns.to_arrow())


def test_normalize_pantheria_subset(pantheria_file):
    config = NormalizerConfig(
        columns=["order", "species", "adult_head_body_len_mm", "home_range_km2"]
    )
    table = load_dataset(pantheria_file, config)
    assert table.column_names == ["order", "species", "adult_head_body_len_mm", "home_range_km2"]
    assert table.column("species").to_pylist() == [
        "Camelus dromedarius",
        "Panthera leo",
        "Canis lupus",
        "Balaena mysticetus",
    ]
    assert table.column("adult_head_body_len_mm").to_pylist() == [None, 1778.11, 1051.5, None]
    assert table.column("home_range_km2").null_count == 1


def test_normalize_pantheria_all_columns(pantheria_file):
    """The binomial replaces the bare species epithet."""
    table = load_dataset(pantheria_file)
    assert table.column_names == [
        "order",
        "family",
        "genus",
        "species",
        "adult_body_mass_g",
        "adult_head_body_len_mm",
        "home_range_km2",
        "litter_size",
    ]
    assert table.column("species").to_pylist() == [
        "Camelus dromedarius",
        "Panthera leo",
        "Canis lupus",
        "Balaena mysticetus",
    ]


def test_numbered_headers_are_clean(tmp_path):
    path = write_tsv(
        tmp_path / "numbered.txt",
        ["MSW05_Order", "MSW05_Binomial", "5-1_AdultBodyMass_g", "15-1_LitterSize"],
        [["Carnivora", "Panthera leo", "158623.93", "2.72"]],
    )
    table = load_dataset(path)
    assert table.column_names == ["order", "species", "adult_body_mass_g", "litter_size"]
    for name in table.column_names:
        assert re.match(r"^[a-z][a-z0-9_]*$", name)


def test_normalize_missing_column(balaena_file):
    config = NormalizerConfig(columns=["order", "genus"])
    with pytest.raises(SchemaError) as excinfo:
        load_dataset(balaena_file, config)
    assert excinfo.value.column == "genus"


def test_normalize_rows_order_preserved(pantheria_file):
    config = NormalizerConfig(columns=["species"])
    before = Dataframe.open_tsv(pantheria_file).to_arrow().column("MSW05_Binomial")
    after = load_dataset(pantheria_file, config).column("species")
    assert after.equals(before)


def test_normalized_table_feeds_arrow(pantheria_file):
    """The result can be analysed directly with the Arrow APIs."""
    config = NormalizerConfig(columns=["order", "species", "adult_body_mass_g", "litter_size"])
    table = load_dataset(pantheria_file, config)

    carnivores = table.filter(pc.equal(table["order"], "Carnivora"))
    assert carnivores.column("species").to_pylist() == ["Panthera leo", "Canis lupus"]

    by_order = table.group_by("order").aggregate([("litter_size", "mean")])
    means = dict(zip(by_order["order"].to_pylist(), by_order["litter_size_mean"].to_pylist()))
    assert means["Carnivora"] == pytest.approx(4.075)


def test_select_subset_zero_rows(tmp_path):
    path = write_tsv(tmp_path / "header.txt", HEADER, [])
    table = load_dataset(path, NormalizerConfig(columns=["order", "species"]))
    assert table.column_names == ["order", "species"]
    assert table.num_rows == 0


def test_load_errors_propagate(tmp_path):
    with pytest.raises(LoadError):
        load_dataset(tmp_path / "missing.txt")

    path = tmp_path / "bad.txt"
    path.write_text("a\tb\n1\t2\n3\n")
    with pytest.raises(ParseError) as excinfo:
        load_dataset(path)
    assert excinfo.value.line_number == 3


def test_column_names(balaena_file):
    assert Dataframe.open_tsv(balaena_file).recase_headers().column_names == [
        "m_s_w05_order",
        "m_s_w05_binomial",
        "adult_body_mass_g",
        "adult_head_body_len_mm",
        "home_range_km2",
        "litter_size",
    ]


def test_init_invalid():
    with pytest.raises(ValueError):
        Dataframe({"a": [1]})


def test_str():
    data = pa.table({"a": [1]})
    df = Dataframe(data).rename({"a": "b"})
    assert str(df) == "Dataframe(RenameNode(rules=[MappingRule({'a': 'b'})], child=PyArrowTableDataSource(columns=['a'], rows=1)))"
    assert isinstance(Dataframe(PyArrowTableDataSource(data)).node, PyArrowTableDataSource)


def test_pantheria_sample_with_preset():
    sample = Path(__file__).parent.parent / "examples" / "data" / "pantheria-sample.txt"
    table = load_dataset(sample, NormalizerConfig(columns=PANTHERIA_COLUMNS))
    assert table.column_names == PANTHERIA_COLUMNS
    assert table.num_rows == 10
    assert table.column("species")[0].as_py() == "Camelus dromedarius"
    assert table.column("adult_head_body_len_mm").null_count == 2
    assert table.column("home_range_km2").null_count == 2
    assert table.column("home_range_km2")[9].as_py() == 0.0


def test_pantheria_sample_defaults():
    sample = Path(__file__).parent.parent / "examples" / "data" / "pantheria-sample.txt"
    table = load_dataset(sample)
    assert table.column_names == PANTHERIA_COLUMNS
    assert table.column("species")[0].as_py() == "Camelus dromedarius"
