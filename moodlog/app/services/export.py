"""Markdown and PDF renderings of journal entries."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from ..core.errors import IOFailure
from ..insights.filters import EntryLike, entry_day

logger = logging.getLogger(__name__)

PDF_MARGIN = 18
_FONT_FAMILY = "Journal"
_BUILTIN_FAMILY = "Helvetica"


def render_markdown(entries: Iterable[EntryLike]) -> str:
    lines: list[str] = []
    for entry in sorted(entries, key=entry_day):
        lines.append(f"# {entry.title}")
        lines.append(f"Date: {entry_day(entry).strftime('%Y-%m-%d')}")
        lines.append(f"Mood: {entry.primary_mood}")
        lines.append("")
        if entry.tags:
            lines.append("Tags: " + ", ".join(entry.tags))
        lines.append("")
        lines.append(entry.content)
        lines.append("")
        lines.append("---")
        lines.append("")
    return "".join(f"{line}\n" for line in lines)


def pdf_filename(entry: EntryLike, now: datetime | None = None) -> str:
    now = now or datetime.now()
    return f"JournalEntry_{entry_day(entry):%Y%m%d}_{now:%H%M%S}.pdf"


class _EntryDocument:
    """Lays out a single entry on A4 pages."""

    def __init__(self, font_path: Path | None = None) -> None:
        self.pdf = FPDF(format="A4")
        self.pdf.set_margins(left=PDF_MARGIN, top=PDF_MARGIN, right=PDF_MARGIN)
        self.pdf.set_auto_page_break(auto=True, margin=PDF_MARGIN)
        if font_path is not None:
            try:
                for style in ("", "B", "I"):
                    self.pdf.add_font(_FONT_FAMILY, style=style, fname=str(font_path))
            except OSError as exc:
                raise IOFailure(f"could not load font {font_path}") from exc
            self._family = _FONT_FAMILY
            self._unicode = True
        else:
            self._family = _BUILTIN_FAMILY
            self._unicode = False

    def _text(self, value: str) -> str:
        if self._unicode:
            return value
        # The built-in Helvetica face only covers Latin-1.
        return value.encode("latin-1", "replace").decode("latin-1")

    def _line(
        self,
        value: str,
        *,
        size: int,
        style: str = "",
        color: tuple[int, int, int] = (0, 0, 0),
        height: float = 8,
    ) -> None:
        self.pdf.set_font(self._family, style=style, size=size)
        self.pdf.set_text_color(*color)
        self.pdf.multi_cell(
            0,
            height,
            self._text(value),
            new_x=XPos.LMARGIN,
            new_y=YPos.NEXT,
        )

    def render(self, entry: EntryLike) -> bytes:
        day = entry_day(entry)
        self.pdf.set_title(f"Journal Entry - {day:%Y-%m-%d}")
        self.pdf.add_page()

        self._line(entry.title or "Journal Entry", size=20, style="B", height=11)
        self.pdf.ln(2)
        self._line(f"Date: {day:%B %d, %Y}", size=12, style="I", color=(128, 128, 128))
        if entry.primary_mood:
            self._line(f"Mood: {entry.primary_mood}", size=10, color=(0, 0, 139))
        if entry.tags:
            self._line("Tags: " + ", ".join(entry.tags), size=10, color=(0, 0, 139))

        self.pdf.ln(3)
        y = self.pdf.get_y()
        self.pdf.set_draw_color(211, 211, 211)
        self.pdf.line(self.pdf.l_margin, y, self.pdf.w - self.pdf.r_margin, y)
        self.pdf.ln(6)

        if entry.content:
            self._line(entry.content, size=11, height=6)

        return bytes(self.pdf.output())


def render_pdf(entry: EntryLike, font_path: Path | None = None) -> bytes:
    return _EntryDocument(font_path).render(entry)


def write_markdown(entries: Iterable[EntryLike], path: Path) -> Path:
    content = render_markdown(entries)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        logger.error("Markdown export failed", exc_info=True)
        raise IOFailure(f"could not write {path}") from exc
    logger.info("Markdown export written", extra={"extra_fields": {"path": str(path)}})
    return path


def write_pdf(
    entry: EntryLike,
    directory: Path,
    *,
    font_path: Path | None = None,
    now: datetime | None = None,
) -> Path:
    path = directory / pdf_filename(entry, now)
    payload = render_pdf(entry, font_path)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        path.write_bytes(payload)
    except OSError as exc:
        logger.error("PDF export failed", exc_info=True)
        raise IOFailure(f"could not write {path}") from exc
    logger.info("PDF export written", extra={"extra_fields": {"path": str(path)}})
    return path


__all__ = [
    "pdf_filename",
    "render_markdown",
    "render_pdf",
    "write_markdown",
    "write_pdf",
]
