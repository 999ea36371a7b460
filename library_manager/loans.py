"""Loan rows for the Loans tab, their classification, and loan save/delete.

"Overdue", "reservation" and "returned" are computed labels; nothing about
them is stored beyond the three loan dates.
"""
import datetime
import logging

from library_manager.catalog import delete_records
from library_manager.exceptions import LibraryError, LoanLockedError

logger = logging.getLogger(__name__)

LOAN_COLUMNS = ['ID', 'Book', 'Borrower', 'BorrowedAt', 'DueDate', 'ReturnedAt']
LOAN_VIEWS = ['All Loans', 'Overdue', 'Reservations', 'Returned']
SEARCH_CRITERIA = ['All', 'BookID']


def parse_date(value):
    """Accept a date, a datetime, an ISO date or anything with an ISO date prefix."""
    if value is None:
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    s = str(value).strip()
    if not s:
        return None
    for candidate in (s, s[:10]):
        try:
            return datetime.date.fromisoformat(candidate)
        except ValueError:
            continue
    return None


def is_returned(returned_at):
    return returned_at is not None and str(returned_at).strip() != ''


def is_overdue(due_date, returned_at, today=None):
    today = today or datetime.date.today()
    if is_returned(returned_at):
        return False
    due = parse_date(due_date)
    return due is not None and due < today


def is_reservation(borrowed_at, today=None):
    today = today or datetime.date.today()
    borrowed = parse_date(borrowed_at)
    return borrowed is not None and borrowed > today


class LoanRow:
    def __init__(self, record, book_title, borrower_name):
        self.id = record.get('id')
        self.book_id = record.get('book_id')
        self.borrower_id = record.get('borrower_id')
        self.borrowed_at = record.get('borrowed_at')
        self.due_date = record.get('due_date')
        self.returned_at = record.get('returned_at')
        self.book_title = book_title
        self.borrower_name = borrower_name

    def is_overdue(self, today=None):
        return is_overdue(self.due_date, self.returned_at, today)

    def is_reservation(self, today=None):
        return is_reservation(self.borrowed_at, today)

    @property
    def is_returned(self):
        return is_returned(self.returned_at)

    def cells(self):
        return {
            'ID': self.id,
            'Book': self.book_title,
            'Borrower': self.borrower_name,
            'BorrowedAt': _display(self.borrowed_at),
            'DueDate': _display(self.due_date),
            'ReturnedAt': _display(self.returned_at),
        }


def _display(value):
    d = parse_date(value)
    if d is not None:
        return d.isoformat()
    return '' if value is None else str(value)


def borrower_display_name(record):
    name = f"{record.get('last_name', '')}, {record.get('first_name', '')}"
    middle = record.get('middle_name')
    if middle and str(middle).strip() and str(middle).lower() != 'null':
        name += f" {middle}"
    return name


class LoanDirectory:
    """Resolves book titles and borrower names, remembering every lookup."""

    def __init__(self, services):
        self.services = services
        self.book_titles = {}
        self.borrower_names = {}

    def book_title(self, book_id):
        if not book_id:
            return ''
        book_id = int(book_id)
        if book_id not in self.book_titles:
            rows = self.services.books.read_book().where_book_id(book_id).read()
            if not rows:
                return str(book_id)
            self.book_titles[book_id] = str(rows[0].get('title', ''))
        return self.book_titles[book_id]

    def borrower_name(self, borrower_id):
        if not borrower_id:
            return ''
        borrower_id = int(borrower_id)
        if borrower_id not in self.borrower_names:
            rows = self.services.borrowers.read_borrower().where_id(borrower_id).read()
            if not rows:
                return str(borrower_id)
            self.borrower_names[borrower_id] = borrower_display_name(rows[0])
        return self.borrower_names[borrower_id]

    def row(self, record):
        return LoanRow(record, self.book_title(record.get('book_id')),
                       self.borrower_name(record.get('borrower_id')))


class LoanBoard:
    """The four loan views built from one set of loan rows."""

    def __init__(self, rows, today=None):
        today = today or datetime.date.today()
        self.all = list(rows)
        self.overdue = [r for r in self.all if r.is_overdue(today)]
        self.reservations = [r for r in self.all if r.is_reservation(today)]
        self.returned = [r for r in self.all if r.is_returned]

    def views(self):
        return dict(zip(LOAN_VIEWS, (self.all, self.overdue, self.reservations, self.returned)))


def load_loans(services, today=None):
    directory = LoanDirectory(services)
    rows = [directory.row(r) for r in services.loans.read_book_loan().read()]
    return LoanBoard(rows, today)


def search_loans(services, criteria, term, today=None):
    term = (term or '').strip()
    if not term:
        return load_loans(services, today)

    if (criteria or '').lower() == 'bookid':
        try:
            book_id = int(term)
        except ValueError:
            raise ValueError("BookID must be a number") from None
        records = services.loans.read_book_loan().where_book_id(book_id).read()
    else:
        lower = term.lower()
        records = [r for r in services.loans.read_book_loan().read()
                   if lower in ' '.join(str(v) for v in r.values()).lower()]

    directory = LoanDirectory(services)
    return LoanBoard([directory.row(r) for r in records], today)


def get_loan(services, loan_id):
    rows = services.loans.read_book_loan().where_id(loan_id).read()
    return rows[0] if rows else None


# --- Loan form ---

class LoanForm:
    def __init__(self, book_id, borrower_id, due_date, borrowed_at, returned_at=None):
        self.book_id = _optional_int(book_id)
        self.borrower_id = _optional_int(borrower_id)
        self.due_date = _form_date(due_date, "Due date")
        self.borrowed_at = _form_date(borrowed_at, "Borrowed date") or datetime.date.today()
        self.returned_at = _form_date(returned_at, "Returned date")

        if self.book_id is None:
            raise ValueError("Please select a book.")
        if self.due_date is None:
            raise ValueError("Please provide a due date.")


def _form_date(value, label):
    """Blank means "not given"; anything else has to be a date."""
    if value is None or str(value).strip() == '':
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise ValueError(f"{label} must be a date (YYYY-MM-DD): {value}")
    return parsed


def _optional_int(value):
    if value is None or str(value).strip() == '':
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid id: {value}") from None


def _set_availability(services, book_id, available):
    try:
        services.books.update_book().set_is_available(available).where_book_id(book_id).update()
    except (ValueError, LibraryError) as e:
        logger.warning("Could not update availability of book %s: %s", book_id, e)


def save_loan(services, form, loan_id=None, today=None):
    """Insert (``loan_id`` None) or update a loan and keep book availability in step."""
    today = today or datetime.date.today()

    if loan_id is None:
        builder = (services.loans.insert_book_loan()
                   .set_book_id(form.book_id)
                   .set_due_date(form.due_date)
                   .set_borrowed_at(form.borrowed_at))
        if form.borrower_id is not None:
            builder.set_borrower_id(form.borrower_id)
        ok = builder.insert()
        # A loan starting in the future is a reservation; the book stays on the shelf
        if ok and form.borrowed_at <= today:
            _set_availability(services, form.book_id, False)
        return ok

    existing = get_loan(services, loan_id)
    if existing is None:
        raise LibraryError(f"Loan {loan_id} not found.")
    if is_returned(existing.get('returned_at')):
        raise LoanLockedError("This loan has already been returned and cannot be modified.")

    builder = (services.loans.update_book_loan()
               .set_due_date(form.due_date)
               .set_borrowed_at(form.borrowed_at)
               .where_id(loan_id))
    if form.borrower_id is not None:
        builder.set_borrower_id(form.borrower_id)
    if form.returned_at is not None:
        builder.set_returned_at(form.returned_at)
    ok = builder.update()
    if ok and form.returned_at is not None:
        _set_availability(services, int(existing['book_id']), True)
    return ok


def delete_loans(services, ids):
    return delete_records(lambda i: services.loans.delete_book_loan().where_id(i), ids, 'loan')
