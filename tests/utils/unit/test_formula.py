"""
Unit Tests: Filter formula builder

Rendering must match what the records API expects, and matches() must agree
with the rendered meaning so in-memory filtering behaves like the server.
"""

from utils.formula import (
    and_,
    field_equals,
    find_in_linked,
    is_empty,
    not_,
    not_empty,
    or_,
    quote,
    record_id_in,
)


def _record(record_id="recA", **fields):
    return {"id": record_id, "fields": fields}


class TestRendering:

    def test_quote_escapes_quotes_and_backslashes(self):
        assert quote('say "hi"') == '"say \\"hi\\""'
        assert quote("a\\b") == '"a\\\\b"'

    def test_quote_numbers_and_booleans(self):
        assert quote(5) == "5"
        assert quote(0.5) == "0.5"
        assert quote(True) == "TRUE()"

    def test_field_equals(self):
        assert str(field_equals("статус", "принят")) == '{статус} = "принят"'

    def test_combinators(self):
        formula = and_(not_(field_equals("статус", "доставлен")), is_empty("работники"))
        assert str(formula) == 'AND(NOT({статус} = "доставлен"), NOT({работники}))'

    def test_find_in_linked(self):
        assert str(find_in_linked("Table 1", "recX")) == 'FIND("recX", ARRAYJOIN({Table 1}))'

    def test_record_id_in_deduplicates(self):
        formula = record_id_in(["recA", "recB", "recA"])
        assert str(formula) == 'OR(RECORD_ID() = "recA", RECORD_ID() = "recB")'

    def test_equal_formulas_compare_equal(self):
        assert field_equals("a", 1) == field_equals("a", 1)
        assert hash(field_equals("a", 1)) == hash(field_equals("a", 1))
        assert field_equals("a", 1) != field_equals("a", 2)


class TestMatching:

    def test_field_equals_unwraps_lookup_lists(self):
        assert field_equals("email", "a@b.c").matches(_record(email=["a@b.c"]))
        assert not field_equals("email", "a@b.c").matches(_record(email="x@b.c"))

    def test_field_equals_compares_integral_floats_as_integers(self):
        assert field_equals("пароль", "1234").matches(_record(пароль=1234.0))

    def test_is_empty(self):
        assert is_empty("работники").matches(_record(работники=[]))
        assert is_empty("работники").matches(_record())
        assert not is_empty("работники").matches(_record(работники=["recE"]))
        assert not_empty("работники").matches(_record(работники=["recE"]))

    def test_find_in_linked(self):
        formula = find_in_linked("Table 1", "recC1")
        assert formula.matches(_record(**{"Table 1": ["recC1"]}))
        assert not formula.matches(_record(**{"Table 1": ["recC2"]}))

    def test_or_and(self):
        formula = or_(field_equals("a", 1), and_(field_equals("b", 2), field_equals("c", 3)))
        assert formula.matches(_record(a=1))
        assert formula.matches(_record(b=2, c=3))
        assert not formula.matches(_record(b=2, c=4))

    def test_empty_record_id_list_matches_nothing(self):
        formula = record_id_in([])
        assert not formula.matches(_record("recA"))
        assert not formula.matches({"id": "recB", "fields": {}})
