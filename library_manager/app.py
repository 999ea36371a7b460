import datetime
import io
import logging
import os

from flask import (Blueprint, Flask, Response, abort, current_app, flash, g, jsonify,
                   redirect, render_template, request, url_for)

from library_manager.borrowers import (BORROWER_COLUMNS, BorrowerForm, borrower_row,
                                       delete_borrowers, get_borrower, picker_items,
                                       save_borrower, search_borrowers)
from library_manager.catalog import (BOOK_COLUMNS, SEARCH_CRITERIA, BookForm, delete_books,
                                     genre_names, load_books, save_book, search_books,
                                     split_genres)
from library_manager.config import Config
from library_manager.csv_io import export_books, import_books
from library_manager.database import DatabaseConnection
from library_manager.exceptions import DatabaseError, LibraryError
from library_manager.loans import (LOAN_COLUMNS, LOAN_VIEWS, LoanForm, delete_loans, get_loan,
                                   is_returned, parse_date, save_loan, search_loans)
from library_manager.loans import SEARCH_CRITERIA as LOAN_SEARCH_CRITERIA
from library_manager.models import db
from library_manager.services import Services

bp = Blueprint('library', __name__)


def create_app(config_object=Config):
    app = Flask(__name__)
    # --- Configuration ---
    app.config.from_object(config_object)

    app.logger.setLevel(app.config['LOG_LEVEL'])
    logging.getLogger('library_manager').setLevel(app.config['LOG_LEVEL'])

    db.init_app(app)

    # --- Database Initialization (Runs once when app starts) ---
    with app.app_context():
        db.create_all()

    app.register_blueprint(bp)

    @app.errorhandler(DatabaseError)
    def database_error(e):
        db.session.rollback()
        app.logger.error("Database error: %s", e)
        return render_template('error.html', message=str(e)), 500

    return app


@bp.before_app_request
def open_services():
    # One connection per request, bound to the request's session
    g.services = Services(DatabaseConnection(db.session))


@bp.app_context_processor
def debounce_settings():
    return {
        'search_debounce_ms': current_app.config['SEARCH_DEBOUNCE_MS'],
        'picker_debounce_ms': current_app.config['PICKER_DEBOUNCE_MS'],
    }


def _fail(e):
    db.session.rollback()
    current_app.logger.warning("%s", e)
    flash(str(e), 'danger')


def _selected_ids():
    return request.form.getlist('ids')


@bp.route('/')
def index():
    return redirect(url_for('library.books'))


# --- Books ---

def _book_rows(criteria, term):
    try:
        return search_books(g.services, criteria, term)
    except ValueError as e:
        flash(str(e), 'warning')
        return load_books(g.services)


@bp.route('/books')
def books():
    criteria = request.args.get('criteria', 'All')
    term = request.args.get('q', '')
    rows = _book_rows(criteria, term)
    return render_template('books.html', rows=rows, columns=BOOK_COLUMNS,
                           criteria_options=SEARCH_CRITERIA, criteria=criteria, term=term)


@bp.route('/books/search')
def books_search():
    try:
        rows = search_books(g.services, request.args.get('criteria', 'All'), request.args.get('q', ''))
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    return jsonify({'columns': BOOK_COLUMNS, 'rows': rows})


def _book_form_values(source, genres=''):
    return {
        'title': source.get('title', ''),
        'author': source.get('author', ''),
        'isbn': source.get('isbn', ''),
        'year': source.get('year', source.get('year_published', '')),
        'genres': source.get('genres', genres),
    }


def _save_book_form(book_id=None):
    values = _book_form_values(request.form)
    try:
        form = BookForm(values['title'], values['author'], values['isbn'], values['year'],
                        split_genres(values['genres']))
        saved_id = save_book(g.services, form, book_id)
    except (ValueError, LibraryError) as e:
        _fail(e)
        return render_template('book_form.html', book_id=book_id, values=values)

    if saved_id is None:
        flash('Failed to save book.', 'danger')
        return render_template('book_form.html', book_id=book_id, values=values)
    flash(f'Book "{form.title}" saved.', 'success')
    return redirect(url_for('library.books'))


@bp.route('/books/new', methods=['GET', 'POST'])
def add_book():
    if request.method == 'POST':
        return _save_book_form()
    return render_template('book_form.html', book_id=None, values=_book_form_values({}))


@bp.route('/books/<int:book_id>/edit', methods=['GET', 'POST'])
def edit_book(book_id):
    if request.method == 'POST':
        return _save_book_form(book_id)
    found = g.services.books.read_book().where_book_id(book_id).read()
    if not found:
        abort(404)
    values = _book_form_values(found[0], '\n'.join(genre_names(g.services, book_id)))
    return render_template('book_form.html', book_id=book_id, values=values)


@bp.route('/books/delete', methods=['POST'])
def delete_selected_books():
    ids = _selected_ids()
    if not ids:
        flash('Select at least one book to delete.', 'warning')
        return redirect(url_for('library.books'))
    result = delete_books(g.services, ids)
    flash(result.summary('book'), 'danger' if result.any_failed else 'success')
    return redirect(url_for('library.books'))


@bp.route('/books/import', methods=['POST'])
def import_csv():
    upload = request.files.get('file')
    if upload is None or not upload.filename:
        flash('No file selected.', 'warning')
        return redirect(url_for('library.books'))
    try:
        text = upload.read().decode('utf-8-sig')
    except UnicodeDecodeError as e:
        flash(f'Failed to read CSV: {e}', 'danger')
        return redirect(url_for('library.books'))

    summary = import_books(g.services, io.StringIO(text))
    flash(summary.message(), 'warning' if summary.failures else 'success')
    return redirect(url_for('library.books'))


@bp.route('/books/export')
def export_csv():
    rows = _book_rows(request.args.get('criteria', 'All'), request.args.get('q', ''))
    return Response(
        export_books(rows),
        mimetype='text/csv',
        headers={'Content-Disposition': 'attachment; filename=books.csv'},
    )


# --- Loans ---

@bp.route('/loans')
def loans():
    criteria = request.args.get('criteria', 'All')
    term = request.args.get('q', '')
    view = request.args.get('view', LOAN_VIEWS[0])
    if view not in LOAN_VIEWS:
        view = LOAN_VIEWS[0]
    try:
        board = search_loans(g.services, criteria, term)
    except ValueError as e:
        flash(str(e), 'warning')
        board = search_loans(g.services, criteria, '')
    return render_template('loans.html', views=board.views(), view=view, columns=LOAN_COLUMNS,
                           criteria_options=LOAN_SEARCH_CRITERIA, criteria=criteria, term=term)


def _loan_form_values(source):
    today = datetime.date.today()
    due_default = today + datetime.timedelta(days=current_app.config['DEFAULT_LOAN_DAYS'])
    return {
        'book_id': source.get('book_id') or '',
        'borrower_id': source.get('borrower_id') or '',
        'due_date': _date_text(source.get('due_date')) or due_default.isoformat(),
        'borrowed_at': _date_text(source.get('borrowed_at')) or today.isoformat(),
        'returned': bool(source.get('returned')) or is_returned(source.get('returned_at')),
        'returned_at': _date_text(source.get('returned_at')) or today.isoformat(),
    }


def _date_text(value):
    d = parse_date(value)
    return d.isoformat() if d is not None else ''


def _positive_int(value):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def _render_loan_form(loan_id, values, locked=False):
    book_title = ''
    borrower_name = ''
    book_id = _positive_int(values['book_id'])
    if book_id:
        found = g.services.books.read_book().where_book_id(book_id).read()
        book_title = found[0]['title'] if found else ''
    borrower_id = _positive_int(values['borrower_id'])
    if borrower_id:
        found = get_borrower(g.services, borrower_id)
        borrower_name = picker_items([found])[0]['name'] if found else ''
    return render_template('loan_form.html', loan_id=loan_id, values=values, locked=locked,
                           book_title=book_title, borrower_name=borrower_name)


def _save_loan_form(loan_id=None):
    values = _loan_form_values(request.form)
    try:
        form = LoanForm(
            request.form.get('book_id'),
            request.form.get('borrower_id'),
            request.form.get('due_date'),
            request.form.get('borrowed_at'),
            request.form.get('returned_at') if request.form.get('returned') else None,
        )
        ok = save_loan(g.services, form, loan_id)
    except (ValueError, LibraryError) as e:
        _fail(e)
        return _render_loan_form(loan_id, values)

    if not ok:
        flash('Failed to save.', 'danger')
        return _render_loan_form(loan_id, values)
    flash('Saved.', 'success')
    return redirect(url_for('library.loans'))


@bp.route('/loans/new', methods=['GET', 'POST'])
def add_loan():
    if request.method == 'POST':
        return _save_loan_form()
    return _render_loan_form(None, _loan_form_values(request.args))


@bp.route('/loans/<int:loan_id>/edit', methods=['GET', 'POST'])
def edit_loan(loan_id):
    if request.method == 'POST':
        return _save_loan_form(loan_id)
    existing = get_loan(g.services, loan_id)
    if existing is None:
        abort(404)
    locked = is_returned(existing.get('returned_at'))
    if locked:
        flash('This loan has already been returned and cannot be modified.', 'info')
    return _render_loan_form(loan_id, _loan_form_values(existing), locked)


@bp.route('/loans/delete', methods=['POST'])
def delete_selected_loans():
    ids = _selected_ids()
    if not ids:
        flash('Select at least one loan to delete.', 'warning')
        return redirect(url_for('library.loans'))
    result = delete_loans(g.services, ids)
    flash(result.summary('loan'), 'danger' if result.any_failed else 'success')
    return redirect(url_for('library.loans'))


# --- Picker endpoints ---

@bp.route('/api/books')
def api_books():
    term = request.args.get('q', '').strip()
    builder = g.services.books.read_book()
    try:
        if term:
            builder.where_title(term)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    return jsonify([{'id': r['id'], 'title': r['title']} for r in builder.read()])


@bp.route('/api/borrowers')
def api_borrowers():
    try:
        records = search_borrowers(g.services, request.args.get('q', ''))
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    return jsonify(picker_items(records))


# --- Borrowers ---

@bp.route('/borrowers')
def borrowers():
    term = request.args.get('q', '')
    try:
        records = search_borrowers(g.services, term)
    except ValueError as e:
        flash(str(e), 'warning')
        records = search_borrowers(g.services, '')
    rows = [borrower_row(r) for r in records]
    return render_template('borrowers.html', rows=rows, columns=BORROWER_COLUMNS, term=term)


def _borrower_form_values(source):
    return {k: source.get(k) or '' for k in ('first_name', 'middle_name', 'last_name', 'contact_num')}


def _save_borrower_form(borrower_id=None):
    values = _borrower_form_values(request.form)
    try:
        form = BorrowerForm(**values)
        ok = save_borrower(g.services, form, borrower_id)
    except (ValueError, LibraryError) as e:
        _fail(e)
        return render_template('borrower_form.html', borrower_id=borrower_id, values=values)

    if not ok:
        flash('Failed to save borrower.', 'danger')
        return render_template('borrower_form.html', borrower_id=borrower_id, values=values)
    flash(f'Borrower "{form.last_name}, {form.first_name}" saved.', 'success')
    return redirect(url_for('library.borrowers'))


@bp.route('/borrowers/new', methods=['GET', 'POST'])
def add_borrower():
    if request.method == 'POST':
        return _save_borrower_form()
    return render_template('borrower_form.html', borrower_id=None, values=_borrower_form_values({}))


@bp.route('/borrowers/<int:borrower_id>/edit', methods=['GET', 'POST'])
def edit_borrower(borrower_id):
    if request.method == 'POST':
        return _save_borrower_form(borrower_id)
    existing = get_borrower(g.services, borrower_id)
    if existing is None:
        abort(404)
    return render_template('borrower_form.html', borrower_id=borrower_id,
                           values=_borrower_form_values(existing))


@bp.route('/borrowers/delete', methods=['POST'])
def delete_selected_borrowers():
    ids = _selected_ids()
    if not ids:
        flash('Select at least one borrower to delete.', 'warning')
        return redirect(url_for('library.borrowers'))
    result = delete_borrowers(g.services, ids)
    flash(result.summary('borrower'), 'danger' if result.any_failed else 'success')
    return redirect(url_for('library.borrowers'))


def main():
    logging.basicConfig(level=Config.LOG_LEVEL,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    app = create_app()
    port = int(os.environ.get("PORT", 5000))
    app.run(host='0.0.0.0', port=port)


if __name__ == '__main__':
    main()
