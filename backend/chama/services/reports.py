"""
Contribution report helpers.

These work on plain record mappings as returned by the API (months as keys,
member summary under ``member``), so the same code drives the board client
and the server-side exports. Totals are always derived from the twelve month
fields; a record's stored ``total`` is never read.
"""
from typing import Any, Iterable, Mapping, Optional

from chama.core.periods import MONTHS, month_label

Record = Mapping[str, Any]

REPORT_HEADERS: list[str] = (
    ["Rank", "Name", "Phone", "Year"]
    + [month_label(m)[:3] for m in MONTHS]
    + ["Total"]
)

EXPORT_COLUMNS: list[str] = (
    ["Rank", "Name", "Phone", "Email", "Year"]
    + [month_label(m) for m in MONTHS]
    + ["Total"]
)


def month_amount(record: Record, month: str) -> float:
    return record.get(month) or 0


def calculate_total(record: Record) -> float:
    """Sum of the twelve monthly amounts of ``record``."""
    return sum(month_amount(record, month) for month in MONTHS)


def sort_by_total(records: Iterable[Record]) -> list[Record]:
    """Records ordered by computed total, highest first (stable)."""
    return sorted(records, key=calculate_total, reverse=True)


def replace_record(records: Iterable[Record], updated: Record) -> list[Record]:
    """Swap in ``updated`` for the record with the same id and re-sort."""
    return sort_by_total(
        updated if record.get("id") == updated.get("id") else record
        for record in records
    )


def _member_field(record: Record, field: str) -> Optional[str]:
    member = record.get("member") or {}
    return member.get(field)


def month_totals(records: Iterable[Record]) -> dict[str, float]:
    """Per-month column sums."""
    records = list(records)
    return {month: sum(month_amount(r, month) for r in records) for month in MONTHS}


def grand_total(records: Iterable[Record]) -> float:
    return sum(calculate_total(r) for r in records)


def build_report_table(records: Iterable[Record]) -> tuple[list[str], list[list[Any]]]:
    """
    Build the printable report table.

    Returns ``(headers, rows)``: one row per record in the given order, then a
    TOTALS row with per-month sums and the grand total (only when there are
    records).
    """
    records = list(records)
    rows: list[list[Any]] = []

    for rank, record in enumerate(records, start=1):
        rows.append(
            [
                rank,
                _member_field(record, "name") or "-",
                _member_field(record, "phone") or "-",
                record.get("year") or "-",
            ]
            + [month_amount(record, month) for month in MONTHS]
            + [calculate_total(record)]
        )

    if records:
        sums = month_totals(records)
        rows.append(
            ["", "TOTALS", "", ""]
            + [sums[month] for month in MONTHS]
            + [grand_total(records)]
        )

    return list(REPORT_HEADERS), rows


def build_export_rows(records: Iterable[Record]) -> list[dict[str, Any]]:
    """One flat row per record for spreadsheet export."""
    rows = []
    for rank, record in enumerate(records, start=1):
        row: dict[str, Any] = {
            "Rank": rank,
            "Name": _member_field(record, "name") or "N/A",
            "Phone": _member_field(record, "phone") or "N/A",
            "Email": _member_field(record, "email") or "N/A",
            "Year": record.get("year") or "N/A",
        }
        for month in MONTHS:
            row[month_label(month)] = month_amount(record, month)
        row["Total"] = calculate_total(record)
        rows.append(row)
    return rows


def format_amount(value: Any) -> str:
    """Render whole amounts without decimals: 500.0 -> '500', 12.5 -> '12.50'."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return str(value)
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}"
