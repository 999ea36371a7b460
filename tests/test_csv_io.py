import io

from library_manager.catalog import genre_names, load_books
from library_manager.csv_io import ImportSummary, export_books, import_books
from tests.factories import add_book


def run_import(services, text):
    return import_books(services, io.StringIO(text))


def test_imports_rows_and_skips_header(services):
    summary = run_import(services, (
        "Title,Author,ISBN,Year,Genres\n"
        "Dune,Frank Herbert,9780441013593,1965,Science Fiction;Classic\n"
        "\n"
        '"Hello, World",Some Author,1234567890,2001\n'
    ))

    assert (summary.imported, summary.skipped, summary.duplicates) == (2, 0, 0)
    rows = load_books(services)
    assert [r['Title'] for r in rows] == ['Dune', 'Hello, World']
    assert rows[0]['Genres'] == 'Science Fiction, Classic'


def test_first_line_without_header_words_is_data(services):
    summary = run_import(services, "Dune,Frank Herbert,9780441013593,1965\n")

    assert summary.imported == 1


def test_isbn_match_with_same_data_is_a_duplicate(services):
    add_book(services)

    summary = run_import(services, "dune, FRANK HERBERT, 9780441013593, 1965\n")

    assert summary.imported == 0
    assert summary.duplicates == 1
    assert len(load_books(services)) == 1


def test_isbn_match_with_different_data_counts_as_matched(services):
    add_book(services)

    summary = run_import(services, "Dune Messiah,Frank Herbert,9780441013593,1969\n")

    assert summary.imported == 0
    assert summary.matched == 1
    assert summary.duplicates == 0
    assert len(load_books(services)) == 1


def test_same_title_author_year_is_a_duplicate_without_isbn_match(services):
    add_book(services)

    summary = run_import(services, "Dune,Frank Herbert,0000000000,1965\n")

    assert summary.duplicates == 1
    assert len(load_books(services)) == 1


def test_isbn_prefix_alone_is_not_a_match(services):
    add_book(services, isbn='9780441013593')

    summary = run_import(services, "Other Book,Someone,978044101,1999\n")

    assert summary.imported == 1
    assert summary.matched == 0


def test_short_rows_are_skipped_and_recorded(services):
    summary = run_import(services, "Dune,Frank Herbert,9780441013593,1965\nJust,Two\n")

    assert summary.imported == 1
    assert summary.skipped == 1
    assert summary.failures == ["Too few columns: Just,Two"]


def test_invalid_year_is_recorded(services):
    summary = run_import(services, "Dune,Frank Herbert,9780441013593,sixty-five\n")

    assert summary.skipped == 1
    assert summary.failures == ["Invalid year for: Dune"]


def test_builder_rejection_is_recorded_per_row(services):
    summary = run_import(services, "Dune,Frank Herbert,,1965\nEmma,Jane Austen,9780141439587,1815\n")

    assert summary.imported == 1
    assert summary.skipped == 1
    assert summary.failures[0].startswith("Error inserting: Dune -> ")


def test_reimport_does_not_duplicate_genres(services):
    line = "Dune,Frank Herbert,9780441013593,1965,Science Fiction; science fiction ;Classic\n"
    run_import(services, line)
    book_id = load_books(services)[0]['ID']

    run_import(services, line.replace("Classic", "Classic;Space Opera"))

    assert genre_names(services, book_id) == ['Science Fiction', 'Classic', 'Space Opera']


def test_summary_message_lists_counts_and_failures():
    summary = ImportSummary()
    summary.imported = 3
    summary.duplicates = 1
    summary.fail("Invalid year for: Dune")

    assert summary.message() == (
        "Imported: 3\n"
        "Skipped: 1\n"
        "Duplicates skipped: 1\n"
        "Failures:\n"
        " - Invalid year for: Dune"
    )


def test_export_quotes_every_cell():
    rows = [{'ID': 1, 'Title': 'Hello, "World"', 'Author': 'A', 'ISBN': '1',
             'Year': 2001, 'Genres': '', 'Available': 'Yes'}]

    assert export_books(rows) == (
        '"ID","Title","Author","ISBN","Year","Genres","Available"\n'
        '"1","Hello, ""World""","A","1","2001","","Yes"\n'
    )


def test_quoted_genres_column_splits_on_commas(services):
    run_import(services, 'The Hobbit,J. R. R. Tolkien,9780547928227,1937,"Fantasy,Adventure"\n')

    assert load_books(services)[0]['Genres'] == 'Fantasy, Adventure'


def test_header_detected_by_isbn_or_author_column(services):
    summary = run_import(services, "Name,Writer,ISBN,Year\nEmma,Jane Austen,9780141439587,1815\n")

    assert summary.imported == 1
    assert summary.failures == []
    assert [r['Title'] for r in load_books(services)] == ['Emma']


def test_header_detected_by_author_column(services):
    summary = run_import(services, "Name,Author,Code,Year\nEmma,Jane Austen,9780141439587,1815\n")

    assert (summary.imported, summary.skipped) == (1, 0)
