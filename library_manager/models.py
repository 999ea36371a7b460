from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

# The builders talk to these tables with hand-written SQL, so every default a
# raw INSERT relies on has to live in the database (server_default).

# ----------------- Book Model -----------------
class Book(db.Model):
    __tablename__ = 'books'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    author = db.Column(db.String(255), nullable=False)
    isbn = db.Column(db.String(13), nullable=False)
    year_published = db.Column(db.Integer, nullable=False)
    is_available = db.Column(db.Boolean, nullable=False, server_default=db.text('1'))

    # Relationship: a book can carry many genres and be involved in many loans
    genres = db.relationship('BookGenre', backref='book', lazy=True, passive_deletes=True)
    loans = db.relationship('BookLoan', backref='book_loaned', lazy=True)

    def __repr__(self):
        return f'<Book {self.title} by {self.author}>'

# ----------------- Book Genre Model -----------------
class BookGenre(db.Model):
    __tablename__ = 'book_genres'

    id = db.Column(db.Integer, primary_key=True)
    book_id = db.Column(db.Integer, db.ForeignKey('books.id', ondelete='CASCADE'), nullable=False)
    genre = db.Column(db.String(255), nullable=False)

    def __repr__(self):
        return f'<BookGenre Book:{self.book_id} {self.genre}>'

# ----------------- Borrower Model -----------------
class Borrower(db.Model):
    __tablename__ = 'borrowers'

    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(256), nullable=False)
    middle_name = db.Column(db.String(256), nullable=False, server_default='')
    last_name = db.Column(db.String(256), nullable=False)
    contact_num = db.Column(db.String(11), nullable=False)

    # Relationship: a borrower can hold many loans
    loans = db.relationship('BookLoan', backref='borrower', lazy=True)

    def __repr__(self):
        return f'<Borrower {self.last_name}, {self.first_name}>'

# ----------------- Book Loan Model -----------------
class BookLoan(db.Model):
    __tablename__ = 'book_loans'

    id = db.Column(db.Integer, primary_key=True)
    book_id = db.Column(db.Integer, db.ForeignKey('books.id'), nullable=False)
    borrower_id = db.Column(db.Integer, db.ForeignKey('borrowers.id'), nullable=True)
    borrowed_at = db.Column(db.Date, nullable=False)
    due_date = db.Column(db.Date, nullable=True)
    returned_at = db.Column(db.Date, nullable=True) # "returned" is inferred from this being set

    def __repr__(self):
        return f'<Loan Book:{self.book_id} Borrower:{self.borrower_id}>'
