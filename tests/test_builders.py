import datetime

import pytest

from library_manager.builders import (
    DeleteBookBuilder,
    DeleteBookGenreBuilder,
    InsertBookBuilder,
    InsertBookLoanBuilder,
    InsertBorrowerBuilder,
    ReadBookBuilder,
    ReadBookGenreBuilder,
    ReadBorrowerBuilder,
    UpdateBookBuilder,
    UpdateBookLoanBuilder,
    UpdateBorrowerBuilder,
)
from library_manager.exceptions import BuilderStateError


def test_insert_book_compiles_named_parameters(recorder):
    builder = (InsertBookBuilder(recorder)
               .set_title('Dune')
               .set_author('Frank Herbert')
               .set_isbn('9780441013593')
               .set_year_published(1965))

    sql, params = builder.compile()

    assert sql == ("INSERT INTO books (title, author, isbn, year_published) "
                   "VALUES (:title, :author, :isbn, :year_published)")
    assert params == {'title': 'Dune', 'author': 'Frank Herbert',
                      'isbn': '9780441013593', 'year_published': 1965}


def test_insert_returns_true_and_exposes_generated_id(recorder):
    builder = (InsertBookBuilder(recorder)
               .set_title('Dune')
               .set_author('Frank Herbert')
               .set_isbn('9780441013593')
               .set_year_published(1965))

    assert builder.insert() is True
    assert builder.inserted_id == 42
    assert len(recorder.calls) == 1


def test_insert_with_no_rows_affected_returns_false(recorder):
    recorder.rowcount = 0
    builder = (InsertBookBuilder(recorder)
               .set_title('Dune')
               .set_author('Frank Herbert')
               .set_isbn('9780441013593')
               .set_year_published(1965))

    assert builder.insert() is False
    assert builder.inserted_id is None


def test_setting_a_field_twice_is_rejected(recorder):
    builder = InsertBookBuilder(recorder).set_title('Dune')

    with pytest.raises(BuilderStateError, match="Title has already been set"):
        builder.set_title('Dune Messiah')


def test_insert_without_required_field_never_reaches_database(recorder):
    builder = InsertBookBuilder(recorder).set_title('Dune').set_author('Frank Herbert')

    with pytest.raises(BuilderStateError, match="ISBN must be set before inserting"):
        builder.insert()
    assert recorder.calls == []


@pytest.mark.parametrize('value', ['', '   ', None])
def test_blank_text_is_rejected(recorder, value):
    with pytest.raises(ValueError, match="Title cannot be null or empty"):
        InsertBookBuilder(recorder).set_title(value)


def test_text_bounds_are_enforced(recorder):
    with pytest.raises(ValueError, match="cannot exceed 255"):
        InsertBookBuilder(recorder).set_author('x' * 256)
    with pytest.raises(ValueError, match="cannot exceed 13"):
        InsertBookBuilder(recorder).set_isbn('1' * 14)


def test_year_zero_is_accepted_but_negative_is_not(recorder):
    assert InsertBookBuilder(recorder).set_year_published(0).values == {'year_published': 0}
    with pytest.raises(ValueError):
        InsertBookBuilder(recorder).set_year_published(-1)


@pytest.mark.parametrize('book_id', [0, -3, '7', True])
def test_ids_must_be_positive_integers(recorder, book_id):
    with pytest.raises(ValueError):
        ReadBookBuilder(recorder).where_book_id(book_id)


def test_read_matches_text_by_prefix_and_year_exactly(recorder):
    sql, params = ReadBookBuilder(recorder).where_title('Du').where_year_published(1965).compile()

    assert sql == "SELECT * FROM books WHERE title LIKE :title AND year_published = :year_published"
    assert params == {'title': 'Du%', 'year_published': 1965}


def test_read_without_conditions_selects_everything(recorder):
    recorder.rows = [{'id': 1, 'title': 'Dune'}]

    assert ReadBookBuilder(recorder).compile() == ("SELECT * FROM books", {})
    assert ReadBookBuilder(recorder).read() == [{'id': 1, 'title': 'Dune'}]


def test_read_genre_by_prefix(recorder):
    sql, params = ReadBookGenreBuilder(recorder).where_book_id(3).where_genre('Sci').compile()

    assert sql == "SELECT * FROM book_genres WHERE book_id = :book_id AND genre LIKE :genre"
    assert params == {'book_id': 3, 'genre': 'Sci%'}


def test_update_sets_fields_and_keys_on_id(recorder):
    sql, params = (UpdateBookBuilder(recorder)
                   .set_title('Dune')
                   .set_year_published(1966)
                   .where_book_id(5)
                   .compile())

    assert sql == "UPDATE books SET title = :title, year_published = :year_published WHERE id = :id"
    assert params == {'title': 'Dune', 'year_published': 1966, 'id': 5}


def test_update_with_no_fields_fails_before_touching_database(recorder):
    builder = UpdateBookBuilder(recorder).where_book_id(1)

    with pytest.raises(BuilderStateError, match="At least one field must be set for update"):
        builder.update()
    assert recorder.calls == []


def test_update_requires_record_id(recorder):
    with pytest.raises(BuilderStateError, match="Loan ID must be set for update"):
        UpdateBookLoanBuilder(recorder).set_due_date(datetime.date(2024, 1, 1)).update()


def test_update_record_id_can_only_be_set_once(recorder):
    builder = UpdateBorrowerBuilder(recorder).where_id(1)

    with pytest.raises(BuilderStateError, match="Borrower ID has already been set"):
        builder.where_id(2)


def test_update_is_available_binds_an_integer(recorder):
    _, params = UpdateBookBuilder(recorder).set_is_available(False).where_book_id(1).compile()

    assert params == {'is_available': 0, 'id': 1}


def test_delete_joins_conditions_with_and(recorder):
    sql, params = DeleteBookBuilder(recorder).where_title('Dune').where_book_id(2).compile()

    assert sql == "DELETE FROM books WHERE title = :title AND id = :id"
    assert params == {'title': 'Dune', 'id': 2}


def test_delete_without_conditions_is_rejected(recorder):
    with pytest.raises(BuilderStateError, match="At least one field must be set for deletion"):
        DeleteBookGenreBuilder(recorder).delete()
    assert recorder.calls == []


def test_loan_dates_are_bound_as_iso_text(recorder):
    builder = (InsertBookLoanBuilder(recorder)
               .set_book_id(1)
               .set_borrower_id(2)
               .set_borrowed_at(datetime.datetime(2024, 3, 5, 14, 30))
               .set_due_date(datetime.date(2024, 3, 19)))

    assert builder.values == {'book_id': 1, 'borrower_id': 2,
                              'borrowed_at': '2024-03-05', 'due_date': '2024-03-19'}


def test_loan_dates_must_be_dates(recorder):
    with pytest.raises(ValueError, match="Due date must be a date"):
        InsertBookLoanBuilder(recorder).set_due_date('2024-03-19')
    with pytest.raises(ValueError, match="Borrowed date must be provided"):
        InsertBookLoanBuilder(recorder).set_borrowed_at(None)


def test_loan_insert_requires_book_and_borrowed_date(recorder):
    builder = InsertBookLoanBuilder(recorder).set_book_id(1)

    with pytest.raises(BuilderStateError, match="Borrowed date must be set before inserting"):
        builder.insert()


def test_borrower_missing_middle_name_is_stored_empty(recorder):
    builder = InsertBorrowerBuilder(recorder).set_middle_name(None)

    assert builder.values == {'middle_name': ''}


def test_borrower_insert_requires_every_setter(recorder):
    builder = (InsertBorrowerBuilder(recorder)
               .set_first_name('Ada')
               .set_last_name('Lovelace')
               .set_contact_num('09171234567'))

    with pytest.raises(BuilderStateError, match="Middle name must be set before inserting"):
        builder.insert()


@pytest.mark.parametrize('contact', ['0917123456', '091712345678', '0917123456a'])
def test_contact_number_must_be_eleven_digits(recorder, contact):
    with pytest.raises(ValueError):
        InsertBorrowerBuilder(recorder).set_contact_num(contact)


def test_borrower_read_by_name_prefix(recorder):
    sql, params = ReadBorrowerBuilder(recorder).where_last_name('Love').compile()

    assert sql == "SELECT * FROM borrowers WHERE last_name LIKE :last_name"
    assert params == {'last_name': 'Love%'}
