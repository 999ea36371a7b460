"""CSV import and export for the book catalog.

Import expects ``title, author, isbn, year[, genres]`` per line. A header
line is recognised by the words title/author/isbn and skipped. Rows that
already exist are detected by ISBN first, then by (title, author, year).
"""
import csv
import io
import logging
import re

from library_manager.catalog import BOOK_COLUMNS
from library_manager.exceptions import LibraryError

logger = logging.getLogger(__name__)

_GENRE_SEPARATORS = re.compile(r'[;,]')


class ImportSummary:
    def __init__(self):
        self.imported = 0
        self.skipped = 0
        self.duplicates = 0
        self.matched = 0
        self.failures = []

    def fail(self, message):
        self.skipped += 1
        self.failures.append(message)

    def message(self):
        lines = [f"Imported: {self.imported}", f"Skipped: {self.skipped}"]
        if self.duplicates:
            lines.append(f"Duplicates skipped: {self.duplicates}")
        if self.matched:
            lines.append(f"Matched existing by ISBN: {self.matched}")
        if self.failures:
            lines.append("Failures:")
            lines.extend(f" - {f}" for f in self.failures)
        return "\n".join(lines)


def _is_header(parts):
    low = '|'.join(parts).lower()
    return 'title' in low or 'author' in low or 'isbn' in low


def _same_book(record, title, author, year):
    return (str(record.get('title', '')).strip().lower() == title.lower()
            and str(record.get('author', '')).strip().lower() == author.lower()
            and str(record.get('year_published', '')).strip() == str(year))


def _find_by_fields(services, title, author, year):
    # The read builder matches title/author by prefix, so narrow to exact matches here
    rows = (services.books.read_book()
            .where_title(title)
            .where_author(author)
            .where_year_published(year)
            .read())
    for r in rows:
        if _same_book(r, title, author, year):
            return r
    return None


def _import_genres(services, book_id, title, genres_col, summary):
    existing = set()
    for g in services.genres.read_book_genre().where_book_id(book_id).read():
        name = str(g.get('genre', '')).strip().lower()
        if name:
            existing.add(name)

    for part in _GENRE_SEPARATORS.split(genres_col):
        genre = part.strip()
        if not genre or genre.lower() in existing:
            continue
        try:
            ok = services.genres.insert_book_genre().set_book_id(book_id).set_genre(genre).insert()
        except (ValueError, LibraryError) as e:
            summary.failures.append(f"Error inserting genre '{genre}' for book: {title} -> {e}")
            continue
        if ok:
            existing.add(genre.lower())
        else:
            summary.failures.append(f"Failed to insert genre '{genre}' for book: {title}")


def _import_row(services, parts, line, summary):
    if len(parts) < 4:
        summary.fail(f"Too few columns: {line}")
        return

    title, author, isbn, year_text = (p.strip() for p in parts[:4])
    try:
        year = int(year_text)
    except ValueError:
        summary.fail(f"Invalid year for: {title}")
        return
    genres_col = parts[4].strip() if len(parts) >= 5 else ''

    book_id = None
    duplicate = False
    if isbn:
        found = services.books.read_book().where_isbn(isbn).read()
        # where_isbn is a prefix match; only an identical ISBN counts
        found = [r for r in found if str(r.get('isbn', '')).strip() == isbn]
        if found:
            book_id = int(found[0]['id'])
            duplicate = _same_book(found[0], title, author, year)
            if not duplicate:
                summary.matched += 1

    if book_id is None:
        existing = _find_by_fields(services, title, author, year)
        if existing is not None:
            book_id = int(existing['id'])
            duplicate = True

    if book_id is None:
        builder = (services.books.insert_book()
                   .set_title(title)
                   .set_author(author)
                   .set_isbn(isbn)
                   .set_year_published(year))
        if not builder.insert() or builder.inserted_id is None:
            summary.fail(f"DB insert failed and could not locate book: {title}")
            return
        book_id = int(builder.inserted_id)
        summary.imported += 1

    if duplicate:
        summary.duplicates += 1

    if genres_col:
        _import_genres(services, book_id, title, genres_col, summary)


def import_books(services, stream):
    """Import books from a text stream; applied rows are never rolled back."""
    summary = ImportSummary()
    first = True
    for line in stream:
        line = line.rstrip('\r\n')
        if not line.strip():
            continue
        parts = next(csv.reader([line], skipinitialspace=True))
        if first:
            first = False
            if _is_header(parts):
                continue

        title = parts[0].strip() if parts else ''
        try:
            _import_row(services, parts, line, summary)
        except (ValueError, LibraryError) as e:
            summary.fail(f"Error inserting: {title} -> {e}")

    for failure in summary.failures:
        logger.warning("CSV import: %s", failure)
    logger.info("CSV import finished: %d imported, %d skipped, %d duplicate(s)",
                summary.imported, summary.skipped, summary.duplicates)
    return summary


def export_books(rows, columns=BOOK_COLUMNS):
    """Render table rows as fully quoted CSV with a header line."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator='\n')
    writer.writerow(columns)
    for row in rows:
        writer.writerow(['' if row.get(c) is None else row.get(c) for c in columns])
    return buffer.getvalue()
