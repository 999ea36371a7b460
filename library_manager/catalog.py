"""Book table rows, search, saving a book with its genres, and batch delete."""
import logging

from library_manager.exceptions import LibraryError

logger = logging.getLogger(__name__)

BOOK_COLUMNS = ['ID', 'Title', 'Author', 'ISBN', 'Year', 'Genres', 'Available']
SEARCH_CRITERIA = ['All', 'Title', 'Author', 'ISBN', 'Year', 'Genre']


def format_available(raw):
    """Normalise the many shapes a driver returns for a boolean into Yes/No."""
    if raw is None:
        return 'No'
    if isinstance(raw, bool):
        return 'Yes' if raw else 'No'
    if isinstance(raw, (int, float)):
        return 'Yes' if raw != 0 else 'No'
    s = str(raw).strip().lower()
    return 'Yes' if s in ('1', 'true', 'yes') else 'No'


def genre_names(services, book_id):
    rows = services.genres.read_book_genre().where_book_id(book_id).read()
    return [str(r['genre']) for r in rows if r.get('genre') and str(r['genre']).strip()]


def book_row(services, record):
    """Turn one ``books`` record into the ordered cells of the book table."""
    book_id = record.get('id')
    try:
        genres = ', '.join(genre_names(services, int(book_id)))
    except (TypeError, ValueError, LibraryError) as e:
        logger.warning("Error loading genres for book %s: %s", book_id, e)
        genres = ''
    return {
        'ID': book_id,
        'Title': record.get('title', ''),
        'Author': record.get('author', ''),
        'ISBN': record.get('isbn', ''),
        'Year': record.get('year_published', ''),
        'Genres': genres,
        'Available': format_available(record.get('is_available')),
    }


def load_books(services):
    return [book_row(services, r) for r in services.books.read_book().read()]


def search_by_genre(services, term):
    matching = services.genres.read_book_genre().where_genre(term).read()
    book_ids = []
    for g in matching:
        if g.get('book_id') is not None and g['book_id'] not in book_ids:
            book_ids.append(g['book_id'])
    logger.debug("Genre '%s' matched %d book(s)", term, len(book_ids))

    results = []
    for book_id in book_ids:
        results.extend(services.books.read_book().where_book_id(int(book_id)).read())
    return results


def search_all(services, term):
    """Case-insensitive substring match over every visible field, genres included."""
    lower = term.lower()
    out = []
    for r in services.books.read_book().read():
        haystack = [
            str(r.get('title', '')),
            str(r.get('author', '')),
            str(r.get('isbn', '')),
            str(r.get('year_published', '')),
            ', '.join(genre_names(services, int(r['id']))),
        ]
        if any(lower in field.lower() for field in haystack):
            out.append(r)
    return out


def search_records(services, criteria, term):
    term = (term or '').strip()
    if not term:
        return services.books.read_book().read()

    criteria = (criteria or 'All').lower()
    if criteria == 'genre':
        return search_by_genre(services, term)
    if criteria == 'title':
        return services.books.read_book().where_title(term).read()
    if criteria == 'author':
        return services.books.read_book().where_author(term).read()
    if criteria == 'isbn':
        return services.books.read_book().where_isbn(term).read()
    if criteria == 'year':
        try:
            year = int(term)
        except ValueError:
            raise ValueError("Year must be a number.") from None
        return services.books.read_book().where_year_published(year).read()
    return search_all(services, term)


def search_books(services, criteria, term):
    return [book_row(services, r) for r in search_records(services, criteria, term)]


# --- Book form ---

class BookForm:
    """Validated contents of the add/update book form."""

    def __init__(self, title, author, isbn, year, genres=()):
        self.title = (title or '').strip()
        self.author = (author or '').strip()
        self.isbn = (isbn or '').strip()
        year_text = str(year if year is not None else '').strip()

        if not (self.title and self.author and self.isbn and year_text):
            raise ValueError("All fields are required.")
        try:
            self.year = int(year_text)
        except ValueError:
            raise ValueError("Year must be a non-negative integer.") from None
        if self.year < 0:
            raise ValueError("Year must be a non-negative integer.")

        self.genres = []
        for g in genres:
            self.add_genre(g)

    def add_genre(self, genre):
        genre = (genre or '').strip()
        if not genre:
            return
        if any(existing.lower() == genre.lower() for existing in self.genres):
            raise ValueError(f"Genre already added: {genre}")
        self.genres.append(genre)


def split_genres(text):
    """Genres typed into the form, one per line or comma separated."""
    return [g.strip() for g in (text or '').replace('\n', ',').split(',') if g.strip()]


def save_book(services, form, book_id=None):
    """Insert a new book (``book_id`` None) or update an existing one.

    Returns the id of the saved book, or None when nothing was written.
    """
    if book_id is None:
        builder = (services.books.insert_book()
                   .set_title(form.title)
                   .set_author(form.author)
                   .set_isbn(form.isbn)
                   .set_year_published(form.year))
        if not builder.insert():
            return None
        new_id = builder.inserted_id
        if new_id is None:
            found = services.books.read_book().where_isbn(form.isbn).read()
            new_id = found[0]['id'] if found else None
        if new_id is not None:
            _insert_genres(services, int(new_id), form.genres)
        return new_id

    ok = (services.books.update_book()
          .set_title(form.title)
          .set_author(form.author)
          .set_isbn(form.isbn)
          .set_year_published(form.year)
          .where_book_id(book_id)
          .update())
    if not ok:
        return None
    sync_genres(services, book_id, form.genres)
    return book_id


def _insert_genres(services, book_id, genres):
    for genre in genres:
        try:
            services.genres.insert_book_genre().set_book_id(book_id).set_genre(genre).insert()
        except (ValueError, LibraryError) as e:
            logger.warning("Error inserting genre '%s': %s", genre, e)


def sync_genres(services, book_id, genres):
    """Make the stored genres of a book match ``genres``.

    Genres no longer listed are deleted, new ones inserted, unchanged ones left alone.
    """
    stored = services.genres.read_book_genre().where_book_id(book_id).read()
    wanted = {g.lower() for g in genres}
    kept = set()
    for record in stored:
        name = str(record.get('genre', '')).strip().lower()
        if name in wanted and name not in kept:
            kept.add(name)
            continue
        services.genres.delete_book_genre().where_id(int(record['id'])).delete()
    _insert_genres(services, book_id, [g for g in genres if g.lower() not in kept])


# --- Batch delete ---

class BatchResult:
    def __init__(self):
        self.succeeded = 0
        self.errors = []

    @property
    def any_failed(self):
        return bool(self.errors)

    def summary(self, noun):
        if self.any_failed:
            return "Some deletes failed:\n" + "\n".join(self.errors)
        return f"Selected {noun}(s) deleted."


def delete_records(factory, ids, noun):
    """Delete each id through ``factory().where_id``-style builders.

    Failures are collected; rows already deleted stay deleted.
    """
    result = BatchResult()
    for raw in ids:
        try:
            record_id = int(raw)
        except (TypeError, ValueError):
            result.errors.append(f"Invalid id: {raw}")
            continue
        try:
            if factory(record_id).delete():
                result.succeeded += 1
            else:
                result.errors.append(f"Failed to delete id: {record_id}")
        except (ValueError, LibraryError) as e:
            result.errors.append(f"Error deleting id {record_id}: {e}")
    for error in result.errors:
        logger.warning("Delete %s: %s", noun, error)
    return result


def delete_books(services, ids):
    return delete_records(lambda i: services.books.delete_book().where_book_id(i), ids, 'book')
