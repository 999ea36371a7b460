"""Borrower table rows, search and save for the Borrowers tab and the loan picker."""
from library_manager.catalog import delete_records
from library_manager.loans import borrower_display_name

BORROWER_COLUMNS = ['ID', 'Last Name', 'First Name', 'Middle Name', 'Contact']


def borrower_row(record):
    return {
        'ID': record.get('id'),
        'Last Name': record.get('last_name', ''),
        'First Name': record.get('first_name', ''),
        'Middle Name': record.get('middle_name') or '',
        'Contact': record.get('contact_num', ''),
    }


def search_borrowers(services, term):
    """Last-name prefix match, falling back to first name; empty term lists everyone."""
    term = (term or '').strip()
    if not term:
        return services.borrowers.read_borrower().read()
    rows = services.borrowers.read_borrower().where_last_name(term).read()
    if not rows:
        rows = services.borrowers.read_borrower().where_first_name(term).read()
    return rows


def picker_items(records):
    return [{'id': r['id'], 'name': borrower_display_name(r)} for r in records]


def get_borrower(services, borrower_id):
    rows = services.borrowers.read_borrower().where_id(borrower_id).read()
    return rows[0] if rows else None


class BorrowerForm:
    def __init__(self, first_name, middle_name, last_name, contact_num):
        self.first_name = (first_name or '').strip()
        self.middle_name = (middle_name or '').strip()
        self.last_name = (last_name or '').strip()
        self.contact_num = (contact_num or '').strip()

        if not (self.first_name and self.last_name and self.contact_num):
            raise ValueError("First name, last name and contact number are required.")


def save_borrower(services, form, borrower_id=None):
    if borrower_id is None:
        builder = services.borrowers.insert_borrower()
    else:
        builder = services.borrowers.update_borrower().where_id(borrower_id)
    builder = (builder
               .set_first_name(form.first_name)
               .set_middle_name(form.middle_name)
               .set_last_name(form.last_name)
               .set_contact_num(form.contact_num))
    if borrower_id is None:
        return builder.insert()
    return builder.update()


def delete_borrowers(services, ids):
    return delete_records(lambda i: services.borrowers.delete_borrower().where_id(i), ids, 'borrower')
