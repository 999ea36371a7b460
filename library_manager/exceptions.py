class LibraryError(Exception): pass
class DatabaseError(LibraryError): pass
class BuilderStateError(LibraryError): pass
class LoanLockedError(LibraryError): pass
