from library_manager.catalog import BookForm, save_book


def add_book(services, title='Dune', author='Frank Herbert', isbn='9780441013593', year=1965,
             genres=()):
    return int(save_book(services, BookForm(title, author, isbn, year, genres)))


def add_borrower(services, first='Ada', last='Lovelace', middle=None, contact='09171234567'):
    builder = (services.borrowers.insert_borrower()
               .set_first_name(first)
               .set_middle_name(middle)
               .set_last_name(last)
               .set_contact_num(contact))
    assert builder.insert()
    return int(builder.inserted_id)


def add_loan(services, book_id, borrowed_at, due_date, borrower_id=None, returned_at=None):
    builder = (services.loans.insert_book_loan()
               .set_book_id(book_id)
               .set_borrowed_at(borrowed_at)
               .set_due_date(due_date))
    if borrower_id is not None:
        builder.set_borrower_id(borrower_id)
    assert builder.insert()
    loan_id = int(builder.inserted_id)
    if returned_at is not None:
        assert services.loans.update_book_loan().set_returned_at(returned_at).where_id(loan_id).update()
    return loan_id
