"""Per-entity factories: one builder constructor per CRUD verb."""
from library_manager.builders import (
    DeleteBookBuilder,
    DeleteBookGenreBuilder,
    DeleteBookLoanBuilder,
    DeleteBorrowerBuilder,
    InsertBookBuilder,
    InsertBookGenreBuilder,
    InsertBookLoanBuilder,
    InsertBorrowerBuilder,
    ReadBookBuilder,
    ReadBookGenreBuilder,
    ReadBookLoanBuilder,
    ReadBorrowerBuilder,
    UpdateBookBuilder,
    UpdateBookGenreBuilder,
    UpdateBookLoanBuilder,
    UpdateBorrowerBuilder,
)


class BookService:
    def __init__(self, connection):
        self.connection = connection

    def insert_book(self):
        return InsertBookBuilder(self.connection)

    def read_book(self):
        return ReadBookBuilder(self.connection)

    def update_book(self):
        return UpdateBookBuilder(self.connection)

    def delete_book(self):
        return DeleteBookBuilder(self.connection)


class BookGenreService:
    def __init__(self, connection):
        self.connection = connection

    def insert_book_genre(self):
        return InsertBookGenreBuilder(self.connection)

    def read_book_genre(self):
        return ReadBookGenreBuilder(self.connection)

    def update_book_genre(self):
        return UpdateBookGenreBuilder(self.connection)

    def delete_book_genre(self):
        return DeleteBookGenreBuilder(self.connection)


class BookLoanService:
    def __init__(self, connection):
        self.connection = connection

    def insert_book_loan(self):
        return InsertBookLoanBuilder(self.connection)

    def read_book_loan(self):
        return ReadBookLoanBuilder(self.connection)

    def update_book_loan(self):
        return UpdateBookLoanBuilder(self.connection)

    def delete_book_loan(self):
        return DeleteBookLoanBuilder(self.connection)


class BorrowerService:
    def __init__(self, connection):
        self.connection = connection

    def insert_borrower(self):
        return InsertBorrowerBuilder(self.connection)

    def read_borrower(self):
        return ReadBorrowerBuilder(self.connection)

    def update_borrower(self):
        return UpdateBorrowerBuilder(self.connection)

    def delete_borrower(self):
        return DeleteBorrowerBuilder(self.connection)


class Services:
    """All four services bound to one connection."""

    def __init__(self, connection):
        self.connection = connection
        self.books = BookService(connection)
        self.genres = BookGenreService(connection)
        self.loans = BookLoanService(connection)
        self.borrowers = BorrowerService(connection)
