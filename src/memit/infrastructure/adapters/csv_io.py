"""
Delimited-text card import and export.

Rows are `front;back` or `front,back`, one card per line, with an optional
header row. Only front and back are read; every imported card starts new.
"""

import csv
import logging
from datetime import date, datetime
from enum import Enum
from pathlib import Path

from memit.application.id_service import new_card, new_deck
from memit.domain.constants import HEADER_MARKERS, MAX_FIELD_LENGTH, MAX_ROW_COUNT
from memit.domain.errors import CardExportError, CardImportError, ErrorKind
from memit.domain.models import Card, Deck

logger = logging.getLogger(__name__)


class ExportFormat(str, Enum):
    SEMICOLON = ";"
    COMMA = ","

    @property
    def separator(self) -> str:
        return self.value


# ---------- Import ----------


def parse_rows(content: str) -> list[tuple[str, str]]:
    """
    Parse delimited text into (front, back) pairs.

    Raises:
        CardImportError: On any malformed row; nothing is returned partially.
    """
    if not content:
        raise CardImportError(ErrorKind.PARSING_ERROR, "Empty file")

    lines = [line.strip() for line in content.lstrip("\ufeff").splitlines()]
    lines = [line for line in lines if line]
    if not lines:
        raise CardImportError(ErrorKind.PARSING_ERROR, "No valid lines found")

    first = lines[0].lower()
    has_header = any(marker in first for marker in HEADER_MARKERS)
    if has_header:
        lines = lines[1:]

    if len(lines) > MAX_ROW_COUNT:
        raise CardImportError(
            ErrorKind.TOO_MANY_ROWS, f"Too many rows: {len(lines)}", length=len(lines)
        )

    rows: list[tuple[str, str]] = []
    for index, line in enumerate(lines):
        line_number = index + (2 if has_header else 1)

        if ";" in line:
            fields = next(csv.reader([line], delimiter=";"))
        elif "," in line:
            fields = next(csv.reader([line], delimiter=","))
        else:
            raise CardImportError(
                ErrorKind.PARSING_ERROR,
                f"Line {line_number}: No valid separator found (use ; or ,)",
                line=line_number,
            )

        if len(fields) < 2:
            raise CardImportError(
                ErrorKind.INVALID_FORMAT, f"Line {line_number}: expected 2 fields", line=line_number
            )

        front = fields[0].strip()
        back = fields[1].strip()

        if not front or not back:
            raise CardImportError(
                ErrorKind.PARSING_ERROR,
                f"Line {line_number}: Empty fields found",
                line=line_number,
            )

        for name, value in (("front", front), ("back", back)):
            if len(value) > MAX_FIELD_LENGTH:
                raise CardImportError(
                    ErrorKind.FIELD_TOO_LONG,
                    f"Line {line_number}: {name} is {len(value)} characters",
                    line=line_number,
                    field=name,
                    length=len(value),
                )

        rows.append((front, back))

    if not rows:
        raise CardImportError(ErrorKind.PARSING_ERROR, "No valid cards found")

    return rows


def import_cards(path: Path, now: datetime) -> list[Card]:
    """Read a delimited-text file and return fresh cards for each row."""
    if not path.exists():
        raise CardImportError(ErrorKind.FILE_NOT_FOUND, f"File not found: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise CardImportError(ErrorKind.ENCODING_ERROR, f"{path} is not UTF-8") from e

    cards = [new_card(front, back, now) for front, back in parse_rows(content)]
    logger.info(f"Imported {len(cards)} cards from {path}")
    return cards


def create_deck_from_file(path: Path, name: str, now: datetime) -> Deck:
    return new_deck(name, now, cards=import_cards(path, now))


# ---------- Export ----------


def _escape_field(value: str, separator: str) -> str:
    if any(ch in value for ch in (separator, '"', "\n", "\r")):
        return '"' + value.replace('"', '""') + '"'
    return value


def export_deck(
    deck: Deck,
    fmt: ExportFormat = ExportFormat.SEMICOLON,
    include_header: bool = True,
) -> str:
    """
    Render the deck's active cards as delimited text.

    Raises:
        CardExportError: If the deck has no cards.
    """
    if not deck.cards:
        raise CardExportError("Cannot export empty deck")

    sep = fmt.separator
    lines = []
    if include_header:
        lines.append(f"front{sep}back")
    for card in deck.active_cards:
        lines.append(f"{_escape_field(card.front, sep)}{sep}{_escape_field(card.back, sep)}")
    return "".join(line + "\n" for line in lines)


def export_filename(deck: Deck, today: date) -> str:
    """A filesystem-safe name like `My_Deck_2026-01-05.csv`."""
    sanitized = deck.name.replace(" ", "_").replace("/", "-").replace("\\", "-")
    return f"{sanitized}_{today.isoformat()}.csv"
