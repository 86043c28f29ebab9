import pytest

from memit.domain.errors import CardExportError, CardImportError, ErrorKind
from memit.infrastructure.adapters.csv_io import (
    ExportFormat,
    create_deck_from_file,
    export_deck,
    export_filename,
    import_cards,
    parse_rows,
)


def test_parse_semicolon_with_header():
    rows = parse_rows("Fronte;Retro\ncasa;house\n\n  cane ; dog  \n")
    assert rows == [("casa", "house"), ("cane", "dog")]


def test_parse_comma_with_quotes():
    rows = parse_rows('ciao,"hello, hi"\n"a ""quoted"" word",b\n')
    assert rows == [("ciao", "hello, hi"), ('a "quoted" word', "b")]


def test_parse_ignores_extra_columns():
    assert parse_rows("a;b;c\n") == [("a", "b")]


@pytest.mark.parametrize(
    "content, kind",
    [
        ("", ErrorKind.PARSING_ERROR),
        ("\n\n  \n", ErrorKind.PARSING_ERROR),
        ("front;back\n", ErrorKind.PARSING_ERROR),
        ("no separator here\n", ErrorKind.PARSING_ERROR),
        ("a;\n", ErrorKind.PARSING_ERROR),
        (";b\n", ErrorKind.PARSING_ERROR),
    ],
)
def test_parse_errors(content, kind):
    with pytest.raises(CardImportError) as exc:
        parse_rows(content)
    assert exc.value.kind is kind


def test_parse_error_reports_line_number():
    with pytest.raises(CardImportError) as exc:
        parse_rows("front;back\ncasa;house\nbroken\n")
    assert exc.value.line == 3


def test_field_too_long():
    with pytest.raises(CardImportError) as exc:
        parse_rows("ok;" + "x" * 501 + "\n")
    assert exc.value.kind is ErrorKind.FIELD_TOO_LONG
    assert exc.value.field == "back"
    assert exc.value.length == 501


def test_field_at_limit_is_accepted():
    assert parse_rows("ok;" + "x" * 500) == [("ok", "x" * 500)]


def test_too_many_rows():
    content = "".join(f"q{i};a{i}\n" for i in range(10001))
    with pytest.raises(CardImportError) as exc:
        parse_rows(content)
    assert exc.value.kind is ErrorKind.TOO_MANY_ROWS


def test_import_missing_file(tmp_path, t0):
    with pytest.raises(CardImportError) as exc:
        import_cards(tmp_path / "missing.csv", t0)
    assert exc.value.kind is ErrorKind.FILE_NOT_FOUND


def test_import_non_utf8(tmp_path, t0):
    path = tmp_path / "latin.csv"
    path.write_bytes("caffè;coffee\n".encode("latin-1"))
    with pytest.raises(CardImportError) as exc:
        import_cards(path, t0)
    assert exc.value.kind is ErrorKind.ENCODING_ERROR


def test_create_deck_from_file(tmp_path, t0):
    path = tmp_path / "a1.csv"
    path.write_text("casa;house\ncane;dog\n", encoding="utf-8")

    deck = create_deck_from_file(path, "Italian A1", t0)

    assert deck.name == "Italian A1"
    assert deck.id.startswith("deck_")
    assert len({c.id for c in deck.cards}) == 2
    assert all(c.is_new and c.review_state.due_at == t0 for c in deck.cards)


def test_export_semicolon_escapes(make_deck, make_card):
    deck = make_deck()
    deck.cards = [
        make_card(front="casa", back="house"),
        make_card(front="a;b", back='say "hi"'),
        make_card(front="hidden", back="x", archived=True),
    ]
    assert export_deck(deck) == 'front;back\ncasa;house\n"a;b";"say ""hi"""\n'


def test_export_comma_without_header(make_deck, make_card):
    deck = make_deck()
    deck.cards = [make_card(front="a,b", back="c;d")]
    assert export_deck(deck, fmt=ExportFormat.COMMA, include_header=False) == '"a,b",c;d\n'


def test_export_empty_deck(make_deck):
    with pytest.raises(CardExportError) as exc:
        export_deck(make_deck())
    assert exc.value.kind is ErrorKind.EMPTY_DECK


def test_export_then_import_keeps_text(tmp_path, make_deck, make_card, t0):
    deck = make_deck()
    deck.cards = [make_card(front='il "gatto"', back="the cat; a feline")]
    path = tmp_path / "out.csv"
    path.write_text(export_deck(deck), encoding="utf-8")

    assert [(c.front, c.back) for c in import_cards(path, t0)] == [
        ('il "gatto"', "the cat; a feline")
    ]


def test_export_filename(make_deck, t0):
    deck = make_deck(name="Italian / Level A1")
    assert export_filename(deck, t0.date()) == "Italian_-_Level_A1_2026-01-05.csv"
