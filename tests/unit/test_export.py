from __future__ import annotations

from datetime import date, datetime
from pathlib import Path

import pytest

from moodlog.app.core.errors import IOFailure
from moodlog.app.services.export import (
    pdf_filename,
    render_markdown,
    render_pdf,
    write_markdown,
    write_pdf,
)


def test_markdown_layout(make_entry) -> None:
    entry = make_entry(date(2024, 7, 4), "Excited", ["Travel", "Food"], "Fireworks!", "Holiday")

    assert render_markdown([entry]) == (
        "# Holiday\n"
        "Date: 2024-07-04\n"
        "Mood: Excited\n"
        "\n"
        "Tags: Travel, Food\n"
        "\n"
        "Fireworks!\n"
        "\n"
        "---\n"
        "\n"
    )


def test_markdown_skips_tag_line_and_sorts_by_date(make_entry) -> None:
    later = make_entry(date(2024, 1, 2), "Sad", title="later")
    earlier = make_entry(date(2024, 1, 1), "Calm", title="earlier")

    text = render_markdown([later, earlier])

    assert "Tags:" not in text
    assert text.index("# earlier") < text.index("# later")
    assert render_markdown([]) == ""


def test_pdf_filename(make_entry) -> None:
    entry = make_entry(date(2024, 3, 9))

    name = pdf_filename(entry, datetime(2024, 3, 10, 7, 5, 1))

    assert name == "JournalEntry_20240309_070501.pdf"


def test_render_pdf_returns_document(make_entry) -> None:
    entry = make_entry(
        date(2024, 3, 9),
        "Calm",
        ["Reflection"],
        "A quiet evening. " * 200,
        "Evening ☕",
    )

    payload = render_pdf(entry)

    assert payload.startswith(b"%PDF")


def test_missing_font_is_io_failure(make_entry, tmp_path: Path) -> None:
    with pytest.raises(IOFailure):
        render_pdf(make_entry(date(2024, 3, 9)), tmp_path / "missing.ttf")


def test_write_exports(make_entry, tmp_path: Path) -> None:
    entry = make_entry(date(2024, 3, 9), content="hello", title="t")

    md_path = write_markdown([entry], tmp_path / "out" / "journal.md")
    pdf_path = write_pdf(entry, tmp_path / "pdf", now=datetime(2024, 3, 9, 12, 0, 0))

    assert md_path.read_text(encoding="utf-8").startswith("# t\n")
    assert pdf_path.name == "JournalEntry_20240309_120000.pdf"
    assert pdf_path.read_bytes().startswith(b"%PDF")


def test_write_into_file_path_is_io_failure(make_entry, tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    entry = make_entry(date(2024, 3, 9))

    with pytest.raises(IOFailure):
        write_markdown([entry], blocker / "journal.md")
    with pytest.raises(IOFailure):
        write_pdf(entry, blocker)
