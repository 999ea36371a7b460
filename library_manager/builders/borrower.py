"""Builders for the ``borrowers`` table."""
from library_manager.builders.base import (
    DeleteBuilder,
    InsertBuilder,
    QueryBuilder,
    ReadBuilder,
    UpdateBuilder,
    require_contact_num,
    require_positive_id,
    require_text,
)

NAME_MAX = 256


class BorrowerBuilder(QueryBuilder):
    table = 'borrowers'

    def _id(self, record_id):
        require_positive_id(record_id, "Borrower ID")
        self._ensure_unset('id', "Borrower ID")
        return self._set_field('id', record_id)

    def _name(self, column, value, label, operator='='):
        require_text(value, label, NAME_MAX)
        self._ensure_unset(column, label)
        return self._set_field(column, value if operator == '=' else f"{value}%", operator)

    def _middle_name(self, middle_name):
        # Optional: an absent middle name is stored as an empty string
        if middle_name is None:
            middle_name = ''
        if len(middle_name) > NAME_MAX:
            raise ValueError(f"Middle name cannot exceed {NAME_MAX} characters")
        self._ensure_unset('middle_name', "Middle name")
        return self._set_field('middle_name', middle_name)

    def _contact_num(self, contact_num, strict=True):
        if strict:
            require_contact_num(contact_num)
        else:
            require_text(contact_num, "Contact number")
        self._ensure_unset('contact_num', "Contact number")
        return self._set_field('contact_num', contact_num)


class InsertBorrowerBuilder(BorrowerBuilder, InsertBuilder):
    def set_first_name(self, first_name):
        return self._name('first_name', first_name, "First name")

    def set_middle_name(self, middle_name):
        return self._middle_name(middle_name)

    def set_last_name(self, last_name):
        return self._name('last_name', last_name, "Last name")

    def set_contact_num(self, contact_num):
        return self._contact_num(contact_num)

    def insert(self):
        self._require_set('first_name', "First name", "inserting")
        self._require_set('middle_name', "Middle name", "inserting")
        self._require_set('last_name', "Last name", "inserting")
        self._require_set('contact_num', "Contact number", "inserting")
        return self._execute_insert()


class ReadBorrowerBuilder(BorrowerBuilder, ReadBuilder):
    def where_id(self, record_id):
        return self._id(record_id)

    def where_first_name(self, first_name):
        return self._name('first_name', first_name, "First name", 'LIKE')

    def where_last_name(self, last_name):
        return self._name('last_name', last_name, "Last name", 'LIKE')

    def where_contact_num(self, contact_num):
        return self._contact_num(contact_num, strict=False)


class UpdateBorrowerBuilder(BorrowerBuilder, UpdateBuilder):
    key_label = "Borrower ID"

    def set_first_name(self, first_name):
        return self._name('first_name', first_name, "First name")

    def set_middle_name(self, middle_name):
        return self._middle_name(middle_name)

    def set_last_name(self, last_name):
        return self._name('last_name', last_name, "Last name")

    def set_contact_num(self, contact_num):
        return self._contact_num(contact_num)

    def where_id(self, record_id):
        return self._set_record_id(record_id)


class DeleteBorrowerBuilder(BorrowerBuilder, DeleteBuilder):
    def where_id(self, record_id):
        return self._id(record_id)

    def where_first_name(self, first_name):
        return self._name('first_name', first_name, "First name")

    def where_last_name(self, last_name):
        return self._name('last_name', last_name, "Last name")

    def where_contact_num(self, contact_num):
        return self._contact_num(contact_num, strict=False)
