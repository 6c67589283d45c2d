"""
Petly Backend: Partial Update Builder Tests
=============================================

What:  SET-clause generation for PATCH operations.
How:   Pure function; no database involved.
"""

import pytest

from petly.exceptions import InvalidUpdateError, ValidationError
from petly.services.partial_update import sql_for_partial_update


class TestPartialUpdate:

    def test_assignment_per_key_in_input_order(self):
        update = sql_for_partial_update(
            {"firstName": "Aliya", "age": 32},
            {"firstName": "first_name"},
        )
        assert update.assignments == ['"first_name" = $1', '"age" = $2']
        assert update.values == ["Aliya", 32]

    def test_unmapped_names_keep_their_spelling(self):
        update = sql_for_partial_update({"city": "Breck"}, {"phoneNumber": "phone_number"})
        assert update.assignments == ['"city" = $1']

    def test_no_alias_table(self):
        update = sql_for_partial_update({"name": "Rex", "age": "Adult", "gender": "Male"})
        assert len(update.assignments) == 3
        assert update.values == ["Rex", "Adult", "Male"]

    def test_set_clause_and_next_placeholder(self):
        update = sql_for_partial_update({"name": "Rex", "goodWKids": None}, {"goodWKids": "good_w_kids"})
        assert update.set_clause == '"name" = $1, "good_w_kids" = $2'
        assert update.next_placeholder == 3

    def test_none_values_are_bound_not_dropped(self):
        update = sql_for_partial_update({"goodWCats": None})
        assert update.values == [None]

    def test_start_offset(self):
        update = sql_for_partial_update({"a": 1, "b": 2}, start=4)
        assert update.assignments == ['"a" = $4', '"b" = $5']
        assert update.next_placeholder == 6

    def test_empty_mapping_rejected(self):
        with pytest.raises(InvalidUpdateError, match="No data to update"):
            sql_for_partial_update({})

    def test_invalid_update_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            sql_for_partial_update({}, {"phoneNumber": "phone_number"})
