"""Test SafeQuery assembly"""

from sqlclaws import Claws, SafeQuery


def test_base_only():
    assert SafeQuery("SELECT * FROM t").sql() == "SELECT * FROM t"


def test_conditional_fragments():
    query = (
        SafeQuery("SELECT * FROM t")
        .when(True, "ORDER BY %i", "created_at")
        .when(False, "LIMIT %d", 5)
        .when(True, "LIMIT %d", 10)
    )
    assert query.sql() == "SELECT * FROM t ORDER BY `created_at` LIMIT 10"


def test_rejected_template_is_dropped(caplog):
    with caplog.at_level("DEBUG", logger="sqlclaws.utils.query"):
        query = SafeQuery("SELECT 1").when(True, "LIMIT %d, %d", 5)

    assert str(query) == "SELECT 1"
    assert "Dropped rejected fragment" in caplog.text


def test_where_from_builder():
    c = Claws().where("status").equals("open")
    query = SafeQuery("SELECT * FROM tickets").where(c).when(True, "LIMIT %d", 1)

    assert query.sql() == "SELECT * FROM tickets WHERE `status` = 'open' LIMIT 1"


def test_empty_builder_adds_nothing():
    assert SafeQuery("SELECT 1").where(Claws()).sql() == "SELECT 1"
