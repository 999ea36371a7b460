"""Builders for the ``books`` table."""
from library_manager.builders.base import (
    DeleteBuilder,
    InsertBuilder,
    QueryBuilder,
    ReadBuilder,
    UpdateBuilder,
    require_non_negative,
    require_positive_id,
    require_text,
)

TITLE_MAX = 255
AUTHOR_MAX = 255
ISBN_MAX = 13


class BookBuilder(QueryBuilder):
    table = 'books'

    def _title(self, title, operator='='):
        require_text(title, "Title", TITLE_MAX)
        self._ensure_unset('title', "Title")
        return self._set_field('title', title if operator == '=' else f"{title}%", operator)

    def _author(self, author, operator='='):
        require_text(author, "Author", AUTHOR_MAX)
        self._ensure_unset('author', "Author")
        return self._set_field('author', author if operator == '=' else f"{author}%", operator)

    def _isbn(self, isbn, operator='='):
        require_text(isbn, "ISBN", ISBN_MAX)
        self._ensure_unset('isbn', "ISBN")
        return self._set_field('isbn', isbn if operator == '=' else f"{isbn}%", operator)

    def _year_published(self, year_published):
        require_non_negative(year_published, "Year published")
        self._ensure_unset('year_published', "Year published")
        return self._set_field('year_published', year_published)

    def _book_id(self, book_id):
        require_positive_id(book_id, "Book ID")
        self._ensure_unset('id', "Book ID")
        return self._set_field('id', book_id)


class InsertBookBuilder(BookBuilder, InsertBuilder):
    def set_title(self, title):
        return self._title(title)

    def set_author(self, author):
        return self._author(author)

    def set_isbn(self, isbn):
        return self._isbn(isbn)

    def set_year_published(self, year_published):
        return self._year_published(year_published)

    def set_is_available(self, available):
        self._ensure_unset('is_available', "is_available")
        return self._set_field('is_available', 1 if available else 0)

    def insert(self):
        self._require_set('title', "Title", "inserting")
        self._require_set('author', "Author", "inserting")
        self._require_set('isbn', "ISBN", "inserting")
        self._require_set('year_published', "Year published", "inserting")
        return self._execute_insert()


class ReadBookBuilder(BookBuilder, ReadBuilder):
    """Title, author and ISBN match by prefix; id and year match exactly."""

    def where_book_id(self, book_id):
        return self._book_id(book_id)

    def where_title(self, title):
        return self._title(title, 'LIKE')

    def where_author(self, author):
        return self._author(author, 'LIKE')

    def where_isbn(self, isbn):
        return self._isbn(isbn, 'LIKE')

    def where_year_published(self, year_published):
        self._ensure_unset('year_published', "Year published")
        return self._set_field('year_published', year_published)


class UpdateBookBuilder(BookBuilder, UpdateBuilder):
    key_label = "Book ID"

    def set_title(self, title):
        return self._title(title)

    def set_author(self, author):
        return self._author(author)

    def set_isbn(self, isbn):
        return self._isbn(isbn)

    def set_year_published(self, year_published):
        return self._year_published(year_published)

    def set_is_available(self, available):
        self._ensure_unset('is_available', "is_available")
        return self._set_field('is_available', 1 if available else 0)

    def where_book_id(self, book_id):
        return self._set_record_id(book_id)


class DeleteBookBuilder(BookBuilder, DeleteBuilder):
    def where_title(self, title):
        return self._title(title)

    def where_author(self, author):
        return self._author(author)

    def where_isbn(self, isbn):
        return self._isbn(isbn)

    def where_year_published(self, year_published):
        return self._year_published(year_published)

    def where_book_id(self, book_id):
        return self._book_id(book_id)
