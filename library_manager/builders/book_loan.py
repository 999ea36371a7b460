"""Builders for the ``book_loans`` table.

Dates are accepted as ``datetime.date`` (or ``datetime``) and bound as ISO
``YYYY-MM-DD`` strings.
"""
from library_manager.builders.base import (
    DeleteBuilder,
    InsertBuilder,
    QueryBuilder,
    ReadBuilder,
    UpdateBuilder,
    require_date,
    require_positive_id,
)


class BookLoanBuilder(QueryBuilder):
    table = 'book_loans'

    def _id(self, record_id):
        require_positive_id(record_id, "ID")
        self._ensure_unset('id', "ID")
        return self._set_field('id', record_id)

    def _book_id(self, book_id):
        require_positive_id(book_id, "Book ID")
        self._ensure_unset('book_id', "Book ID")
        return self._set_field('book_id', book_id)

    def _borrower_id(self, borrower_id):
        require_positive_id(borrower_id, "Borrower ID")
        self._ensure_unset('borrower_id', "Borrower ID")
        return self._set_field('borrower_id', borrower_id)

    def _date(self, column, value, label):
        value = require_date(value, label)
        self._ensure_unset(column, label)
        return self._set_field(column, value)

    def _borrowed_at(self, borrowed_at):
        return self._date('borrowed_at', borrowed_at, "Borrowed date")

    def _due_date(self, due_date):
        return self._date('due_date', due_date, "Due date")

    def _returned_at(self, returned_at):
        return self._date('returned_at', returned_at, "Returned date")


class InsertBookLoanBuilder(BookLoanBuilder, InsertBuilder):
    def set_book_id(self, book_id):
        return self._book_id(book_id)

    def set_borrower_id(self, borrower_id):
        return self._borrower_id(borrower_id)

    def set_borrowed_at(self, borrowed_at):
        return self._borrowed_at(borrowed_at)

    def set_due_date(self, due_date):
        return self._due_date(due_date)

    def insert(self):
        self._require_set('book_id', "Book ID", "inserting")
        self._require_set('borrowed_at', "Borrowed date", "inserting")
        return self._execute_insert()


class ReadBookLoanBuilder(BookLoanBuilder, ReadBuilder):
    def where_id(self, record_id):
        return self._id(record_id)

    def where_book_id(self, book_id):
        return self._book_id(book_id)

    def where_borrower_id(self, borrower_id):
        return self._borrower_id(borrower_id)

    def where_borrowed_at(self, borrowed_at):
        return self._borrowed_at(borrowed_at)

    def where_due_date(self, due_date):
        return self._due_date(due_date)

    def where_returned_at(self, returned_at):
        return self._returned_at(returned_at)


class UpdateBookLoanBuilder(BookLoanBuilder, UpdateBuilder):
    key_label = "Loan ID"

    def where_id(self, record_id):
        return self._set_record_id(record_id)

    def set_borrower_id(self, borrower_id):
        return self._borrower_id(borrower_id)

    def set_borrowed_at(self, borrowed_at):
        return self._borrowed_at(borrowed_at)

    def set_due_date(self, due_date):
        return self._due_date(due_date)

    def set_returned_at(self, returned_at):
        return self._returned_at(returned_at)


class DeleteBookLoanBuilder(BookLoanBuilder, DeleteBuilder):
    def where_id(self, record_id):
        return self._id(record_id)

    def where_book_id(self, book_id):
        return self._book_id(book_id)

    def where_borrower_id(self, borrower_id):
        return self._borrower_id(borrower_id)

    def where_borrowed_at(self, borrowed_at):
        return self._borrowed_at(borrowed_at)

    def where_due_date(self, due_date):
        return self._due_date(due_date)

    def where_returned_at(self, returned_at):
        return self._returned_at(returned_at)
