from library_manager.builders.book import (
    DeleteBookBuilder,
    InsertBookBuilder,
    ReadBookBuilder,
    UpdateBookBuilder,
)
from library_manager.builders.book_genre import (
    DeleteBookGenreBuilder,
    InsertBookGenreBuilder,
    ReadBookGenreBuilder,
    UpdateBookGenreBuilder,
)
from library_manager.builders.book_loan import (
    DeleteBookLoanBuilder,
    InsertBookLoanBuilder,
    ReadBookLoanBuilder,
    UpdateBookLoanBuilder,
)
from library_manager.builders.borrower import (
    DeleteBorrowerBuilder,
    InsertBorrowerBuilder,
    ReadBorrowerBuilder,
    UpdateBorrowerBuilder,
)

__all__ = [
    'DeleteBookBuilder',
    'InsertBookBuilder',
    'ReadBookBuilder',
    'UpdateBookBuilder',
    'DeleteBookGenreBuilder',
    'InsertBookGenreBuilder',
    'ReadBookGenreBuilder',
    'UpdateBookGenreBuilder',
    'DeleteBookLoanBuilder',
    'InsertBookLoanBuilder',
    'ReadBookLoanBuilder',
    'UpdateBookLoanBuilder',
    'DeleteBorrowerBuilder',
    'InsertBorrowerBuilder',
    'ReadBorrowerBuilder',
    'UpdateBorrowerBuilder',
]
