from __future__ import annotations

import pytest
from mysql.connector import errorcode
from mysql.connector.errors import DatabaseError, IntegrityError

from hackathon_admin.core.exceptions import ConflictError, StorageError, ValidationError
from hackathon_admin.database.bootstrap import iter_sql_statements
from hackathon_admin.database.mysql_base import db_cursor, in_clause, set_clause


class FakeCursor:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self):
        self.cursor_obj = FakeCursor()
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self.cursor_obj

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self):
        self.conn = FakeConnection()

    def connect(self):
        return self.conn


def test_commits_and_releases_on_success():
    factory = FakeFactory()

    with db_cursor(factory) as (conn, cur):
        assert cur is factory.conn.cursor_obj

    assert factory.conn.committed
    assert not factory.conn.rolled_back
    assert factory.conn.closed and factory.conn.cursor_obj.closed


def test_duplicate_key_becomes_conflict():
    factory = FakeFactory()

    with pytest.raises(ConflictError):
        with db_cursor(factory):
            raise IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)

    assert factory.conn.rolled_back
    assert not factory.conn.committed
    assert factory.conn.closed


def test_missing_reference_becomes_validation_error():
    with pytest.raises(ValidationError):
        with db_cursor(FakeFactory()):
            raise IntegrityError(msg="FK", errno=errorcode.ER_NO_REFERENCED_ROW_2)


def test_other_driver_errors_become_storage_errors():
    with pytest.raises(StorageError):
        with db_cursor(FakeFactory()):
            raise DatabaseError(msg="Lock wait timeout", errno=errorcode.ER_LOCK_WAIT_TIMEOUT)


def test_domain_errors_pass_through_after_rollback():
    factory = FakeFactory()

    with pytest.raises(ValidationError, match="boom"):
        with db_cursor(factory):
            raise ValidationError("boom")

    assert factory.conn.rolled_back


def test_set_clause_whitelists_columns():
    sql, params = set_clause({"name": "A", "email": "a@x"}, allowed=("name", "email", "phone"))

    assert sql == "name=%s, email=%s"
    assert params == ("A", "a@x")
    with pytest.raises(ValueError):
        set_clause({"password": "x"}, allowed=("name",))


def test_in_clause_binds_values():
    assert in_clause([3, 1]) == ("%s, %s", (3, 1))
    with pytest.raises(ValueError):
        in_clause([])


def test_sql_splitter_ignores_quoted_semicolons():
    script = "CREATE TABLE a (x VARCHAR(3) DEFAULT ';');\nINSERT INTO a VALUES ('it\\'s;');\n"

    assert list(iter_sql_statements(script)) == [
        "CREATE TABLE a (x VARCHAR(3) DEFAULT ';')",
        "INSERT INTO a VALUES ('it\\'s;')",
    ]
