"""Builders for the ``book_genres`` table."""
from library_manager.builders.base import (
    DeleteBuilder,
    InsertBuilder,
    QueryBuilder,
    ReadBuilder,
    UpdateBuilder,
    require_positive_id,
    require_text,
)

GENRE_MAX = 255


class BookGenreBuilder(QueryBuilder):
    table = 'book_genres'

    def _id(self, record_id):
        require_positive_id(record_id, "ID")
        self._ensure_unset('id', "ID")
        return self._set_field('id', record_id)

    def _book_id(self, book_id):
        require_positive_id(book_id, "Book ID")
        self._ensure_unset('book_id', "Book ID")
        return self._set_field('book_id', book_id)

    def _genre(self, genre, operator='='):
        require_text(genre, "Genre", GENRE_MAX)
        self._ensure_unset('genre', "Genre")
        return self._set_field('genre', genre if operator == '=' else f"{genre}%", operator)


class InsertBookGenreBuilder(BookGenreBuilder, InsertBuilder):
    def set_book_id(self, book_id):
        return self._book_id(book_id)

    def set_genre(self, genre):
        return self._genre(genre)

    def insert(self):
        self._require_set('book_id', "Book ID", "inserting")
        self._require_set('genre', "Genre", "inserting")
        return self._execute_insert()


class ReadBookGenreBuilder(BookGenreBuilder, ReadBuilder):
    def where_book_id(self, book_id):
        return self._book_id(book_id)

    def where_genre(self, genre):
        return self._genre(genre, 'LIKE')


class UpdateBookGenreBuilder(BookGenreBuilder, UpdateBuilder):
    def where_id(self, record_id):
        return self._set_record_id(record_id)

    def set_book_id(self, book_id):
        return self._book_id(book_id)

    def set_genre(self, genre):
        return self._genre(genre)


class DeleteBookGenreBuilder(BookGenreBuilder, DeleteBuilder):
    def where_id(self, record_id):
        return self._id(record_id)

    def where_book_id(self, book_id):
        return self._book_id(book_id)

    def where_genre(self, genre):
        return self._genre(genre)
