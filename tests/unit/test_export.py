"""Unit tests for CSV export."""

import csv
import io

from src.guide.export import CSV_HEADER, csv_filename, export_csv
from src.models.schemas import Category


def _parse(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text)))


def test_header_only_for_empty_batch():
    text = export_csv([])
    assert text == ",".join(f'"{column}"' for column in CSV_HEADER)


def test_one_line_per_record_without_trailing_newline(generator):
    records = generator.generate(Category.EAT, "United States", "Austin", 7)

    text = export_csv(records, Category.EAT)

    assert len(text.split("\n")) == 8
    assert not text.endswith("\n")


def test_every_field_is_quoted(generator):
    records = generator.generate(Category.PLAY, "United States", "Austin", 3)
    for line in export_csv(records).split("\n"):
        fields = line.split('","')
        assert len(fields) == len(CSV_HEADER)
        assert line.startswith('"') and line.endswith('"')


def test_embedded_quotes_are_doubled(sample_record):
    text = export_csv([sample_record])

    assert '"Joe\'s ""Famous"" Grill"' in text
    assert _parse(text)[1][0] == 'Joe\'s "Famous" Grill'


def test_row_layout(sample_record):
    record = sample_record.model_copy(update={"rating": 4.56})

    row = dict(zip(CSV_HEADER, _parse(export_csv([record]))[1]))

    assert row["Facebook"] == ""
    assert row["Instagram"] == "https://instagram.com/business1"
    assert row["Email"] == ""
    assert row["Image Links"] == (
        "https://images.example.com/1.jpg; https://images.example.com/2.jpg"
    )
    assert row["Rating"] == "4.6"
    assert row["Review Count"] == "321"
    assert row["Source"] == "Yelp"


def test_filename():
    assert csv_filename(Category.EAT) == "Eat_places.csv"
    assert csv_filename("Drink") == "Drink_places.csv"


def test_absent_fields_are_empty_quoted_cells(sample_record):
    line = export_csv([sample_record]).split("\n")[1]

    cells = dict(zip(CSV_HEADER, line[1:-1].split('","')))

    assert cells["Facebook"] == ""
    assert cells["Email"] == ""
    assert ',"",' in line
