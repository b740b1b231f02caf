import csv
from datetime import datetime, timedelta, timezone
from pathlib import Path

from openpyxl import load_workbook

from leadsync.core.models import FieldBag
from leadsync.processing.assembler import assemble_lead
from leadsync.reporting import LEAD_HEADERS, lead_to_row, leads_to_rows, write_csv, write_excel


def _lead(make_message, fixed_now, **fields):
    message = make_message(
        "",
        received_at=datetime(2025, 1, 14, 10, 15, tzinfo=timezone(timedelta(hours=1))),
    )
    return assemble_lead(message, FieldBag(fields), now=fixed_now)


def test_lead_to_row_formats_values(make_message, fixed_now):
    lead = _lead(
        make_message,
        fixed_now,
        name="  Sarah   Collins ",
        email="sarah@example.co.uk",
        postcode="m1 4bt",
        vrm="ab12cde",
        usedCondition="on",
        newCondition="off",
        additionalNote="Line one\nLine two",
    )

    row = lead_to_row(lead)

    assert list(row) == LEAD_HEADERS
    assert row["Received"] == "2025-01-14 09:15:00"
    assert row["Name"] == "Sarah Collins"
    assert row["Postcode"] == "M1 4BT"
    assert row["VRM"] == "AB12CDE"
    assert row["Used"] == "yes"
    assert row["New"] == "no"
    assert row["Reconditioned"] == ""
    assert row["Phone"] == ""
    assert row["Note"] == "Line one Line two"


def test_write_csv_uses_lead_headers(tmp_path: Path, make_message, fixed_now):
    rows = leads_to_rows([_lead(make_message, fixed_now, email="a@b.co"), _lead(make_message, fixed_now, number="0161")])
    output = tmp_path / "nested" / "leads.csv"

    write_csv(rows, output)

    with output.open(encoding="utf-8") as fh:
        reader = csv.DictReader(fh)
        assert reader.fieldnames == LEAD_HEADERS
        written = list(reader)
    assert [row["Email"] for row in written] == ["a@b.co", ""]
    assert [row["Phone"] for row in written] == ["", "0161"]


def test_write_csv_skips_empty_input(tmp_path: Path):
    output = tmp_path / "leads.csv"

    write_csv([], output)

    assert not output.exists()


def test_write_excel_creates_leads_sheet(tmp_path: Path, make_message, fixed_now):
    rows = leads_to_rows([_lead(make_message, fixed_now, email="a@b.co", make="Ford")])
    output = tmp_path / "leads.xlsx"

    write_excel(rows, output)

    sheet = load_workbook(output).active
    assert sheet.title == "leads"
    assert [cell.value for cell in sheet[1]] == LEAD_HEADERS
    assert sheet.max_row == 2
    assert sheet.cell(row=2, column=LEAD_HEADERS.index("Make") + 1).value == "Ford"
