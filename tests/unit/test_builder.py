"""Test the Claws WHERE clause builder"""

import warnings
from unittest.mock import Mock

import pytest

from sqlclaws import BuilderSettings, Claws, claws, register_sanitizer_hook
from sqlclaws.enums import Operator
from sqlclaws.utils import types


COMPARE_CASES = [
    ("=", "equals", "( `a` = 1 OR `a` = 2 )"),
    ("!=", "doesnt_equal", "( `a` != 1 OR `a` != 2 )"),
    ("<", "lt", "( `a` < 1 OR `a` < 2 )"),
    (">", "gt", "( `a` > 1 OR `a` > 2 )"),
    ("<=", "lte", "( `a` <= 1 OR `a` <= 2 )"),
    (">=", "gte", "( `a` >= 1 OR `a` >= 2 )"),
    ("LIKE", "like", "( `a` LIKE '%1%' OR `a` LIKE '%2%' )"),
    ("NOT LIKE", "not_like", "( `a` NOT LIKE '%1%' OR `a` NOT LIKE '%2%' )"),
    ("IN", "in_", "`a` IN( 1, 2 )"),
    ("NOT IN", "not_in", "`a` NOT IN( 1, 2 )"),
    ("BETWEEN", "between", "( `a` BETWEEN 1 AND 2 )"),
    ("NOT BETWEEN", "not_between", "( `a` NOT BETWEEN 1 AND 2 )"),
    ("EXISTS", "exists", "( `a` = 1 OR `a` = 2 )"),
    ("NOT EXISTS", "not_exists", "`a` IS NULL"),
]


@pytest.mark.parametrize("token,method,expected", COMPARE_CASES)
def test_every_compare_token(token, method, expected):
    """where() shorthand, compare() and the named method render the same phrase"""
    via_where = claws().where("a", token, [1, 2]).get_sql()
    via_compare = claws().where("a").compare(token, [1, 2]).get_sql()
    via_method = getattr(claws().where("a"), method)([1, 2]).get_sql()

    assert via_where == via_compare == via_method == f"WHERE {expected}"


class TestWhere:
    """Test field selection and the where() shorthand"""

    def test_single_comparison(self, builder):
        assert builder.where("a").equals(1).get_sql() == "WHERE `a` = 1"

    def test_shorthand_with_callback(self, builder):
        assert builder.where("id", "IN", ["1", "2x"], "int").get_sql() == "WHERE `id` IN( 1, 2 )"

    def test_shorthand_without_values_adds_nothing(self, builder):
        assert builder.where("a", "=").get_sql() == ""
        assert builder.current_field == "a"

    def test_shorthand_not_exists_needs_no_values(self, builder):
        assert builder.where("deleted_at", "NOT EXISTS").get_sql() == "WHERE `deleted_at` IS NULL"

    def test_fields_are_joined_with_and(self, builder):
        builder.where("a").equals(1)
        builder.where("b").like("x")
        assert builder.get_sql() == "WHERE `a` = 1 AND `b` LIKE '%x%'"

    def test_field_is_sanitized(self, builder):
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            builder.where("Bad Field;")
        assert builder.current_field == "badfield"

    def test_unknown_clause_is_ignored(self, builder):
        builder.where("a")
        builder.set_current_clause("having")
        assert builder.get_clause() == "where"
        assert builder.get_clause("order") == "where"


class TestAmending:
    """Test or_() and and_()"""

    def test_or_amends_previous_phrase(self, builder):
        builder.where("status").equals("open").or_().equals("pending")
        builder.where("priority").gte(3, "int")
        assert builder.get_sql() == (
            "WHERE `status` = 'open' OR `status` = 'pending' AND `priority` >= 3"
        )

    def test_amendment_state(self, builder):
        builder.where("a").equals(1)
        assert not builder.amending
        assert builder.previous_phrase == "`a` = 1"

        builder.or_()
        assert builder.amending
        assert builder.current_operator is Operator.OR
        assert builder.previous_phrase == "`a` = 1"

        builder.equals(2)
        assert not builder.amending
        assert builder.previous_phrase == "`a` = 1 OR `a` = 2"
        assert builder.phrases() == ["`a` = 1 OR `a` = 2"]

    def test_chained_operators(self, builder):
        builder.where("a").equals(1).and_().equals(2).or_().equals(3)
        assert builder.get_sql() == "WHERE `a` = 1 AND `a` = 2 OR `a` = 3"

    def test_amend_across_fields(self, builder):
        builder.where("a").equals(1).where("b").or_().equals(2)
        assert builder.get_sql() == "WHERE `a` = 1 OR `b` = 2"

    def test_or_without_previous_phrase_adds_new_phrase(self, builder):
        builder.where("a").or_().equals(1)
        assert builder.phrases() == ["`a` = 1"]

    def test_empty_fragment_keeps_amendment_pending(self, builder):
        builder.where("a").equals(1).or_().in_([])
        assert builder.amending
        builder.equals(2)
        assert builder.get_sql() == "WHERE `a` = 1 OR `a` = 2"


class TestComparisons:
    """Test individual comparison methods"""

    def test_in_with_single_value_degrades(self, builder):
        assert builder.where("a").in_(5).get_sql() == "WHERE `a` = 5"
        assert builder.where("a").not_in("x").get_sql() == "WHERE `a` != 'x'"

    def test_empty_in_adds_nothing(self, builder):
        assert builder.where("a").in_([]).get_sql() == ""

    def test_between_needs_two_values(self, builder):
        assert builder.where("a").between([1]).get_sql() == ""
        assert builder.where("a").between([1, 5, 9]).get_sql() == "WHERE ( `a` BETWEEN 1 AND 5 )"

    def test_custom_callable(self, builder):
        sql = builder.where("name").equals("bob", str.upper).get_sql()
        assert sql == "WHERE `name` = 'BOB'"

    def test_operator_argument(self, builder):
        sql = builder.where("a").doesnt_equal([1, 2], operator="AND").get_sql()
        assert sql == "WHERE ( `a` != 1 AND `a` != 2 )"

    def test_like_escapes_wildcards(self, builder, pct):
        sql = builder.where("title").like("100%").get_sql()
        assert sql == f"WHERE `title` LIKE '%100\\\\{pct}%'"

    def test_get_cast_for_type(self, builder):
        assert builder.get_cast_for_type("integer") == "SIGNED"
        assert builder.get_cast_for_type("text") == "CHAR"

    def test_comparison_before_where_is_dropped(self, builder):
        with pytest.warns(UserWarning, match="No clause selected"):
            builder.equals(1)
        assert builder.where("a").get_sql() == ""


class TestRendering:
    """Test get_sql() and resets"""

    def test_no_phrases(self, builder):
        assert builder.get_sql() == ""
        assert builder.where("a").get_sql() == ""

    def test_get_sql_resets(self, builder):
        builder.where("a").equals(1).or_()
        assert builder.get_sql() == "WHERE `a` = 1"

        assert builder.current_field == ""
        assert not builder.amending
        assert builder.previous_phrase is None
        assert builder.phrases("where") == []
        assert builder.get_sql("where") == ""

    def test_get_sql_without_reset(self, builder):
        builder.where("a").equals(1)
        assert builder.get_sql(reset_vars=False) == "WHERE `a` = 1"
        assert builder.get_sql(reset_vars=False) == "WHERE `a` = 1"
        assert builder.current_field == "a"

    def test_reset_after_render_setting(self):
        c = Claws(BuilderSettings(reset_after_render=False))
        c.where("a").equals(1)
        c.get_sql()
        assert c.get_sql() == "WHERE `a` = 1"

    def test_repr(self, builder):
        builder.where("a").equals(1)
        assert repr(builder) == "Claws(clause='where', field='a', phrases=1)"


class TestSettings:
    """Test builder defaults coming from BuilderSettings"""

    def test_and_operator(self):
        c = Claws(BuilderSettings(operator="and"))
        assert c.current_operator is Operator.AND
        assert c.where("a").equals([1, 2]).get_sql() == "WHERE ( `a` = 1 AND `a` = 2 )"

    def test_default_sanitizer(self):
        c = Claws(BuilderSettings(default_sanitizer="int"))
        assert c.where("a").equals("5x").get_sql() == "WHERE `a` = 5"

    def test_like_sanitizer(self):
        c = Claws(BuilderSettings(like_sanitizer="key"))
        assert c.where("a").like("Hello World").get_sql() == "WHERE `a` LIKE '%helloworld%'"

    def test_from_profile(self, settings_file):
        c = Claws.from_profile("strict", settings_file)
        assert c.settings.default_sanitizer == "string"
        assert c.current_operator is Operator.AND
        assert c.where("a").equals(" <b>x</b> ").get_sql() == "WHERE `a` = 'x'"


class TestSanitizerHooks:
    """Test hooks replacing sanitizer callbacks"""

    def test_builder_hook_receives_builder(self):
        hook = Mock(return_value=None)
        c = Claws(sanitizer_hook=hook)
        c.where("a").equals("x")
        hook.assert_called_once_with(types.to_scalar, "esc_sql", c)

    def test_builder_hook_override(self):
        def shout(default, name, builder):
            return str.upper if name == "esc_sql" else None

        c = Claws(sanitizer_hook=shout)
        assert c.where("a").equals("x").get_sql() == "WHERE `a` = 'X'"
        assert c.get_callback("esc_sql") is str.upper
        assert c.get_callback_for_type("int") is types.to_int

    def test_global_hook(self, builder):
        register_sanitizer_hook(lambda default, name, b: str.upper if name == "string" else None)
        assert builder.where("n").equals("abc", "string").get_sql() == "WHERE `n` = 'ABC'"
