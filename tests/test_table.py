import pytest

from minirdbms.errors import ColumnTypeError, ConstraintError
from minirdbms.table import Table
from minirdbms.types import Column, DataType, TableSchema


def make_users():
    schema = TableSchema(
        name="users",
        columns=[
            Column("id", DataType.NUMBER, is_primary=True),
            Column("email", DataType.STRING, is_unique=True),
            Column("name", DataType.STRING, nullable=False),
            Column("active", DataType.BOOLEAN),
        ],
        primary_key="id",
    )
    return Table(schema)


def scan(table, column, value):
    return [row for row in table.rows if row[column] == value and type(row[column]) is type(value)]


def assert_indexes_match_scan(table):
    for column, index in table.indexes.items():
        for row in table.rows:
            value = row[column]
            if value is None:
                continue
            assert table.find_by_index(column, value) == scan(table, column, value)
        assert len(index) == len({row[column] for row in table.rows if row[column] is not None})


def test_insert_fills_missing_columns_with_null():
    table = make_users()
    row = table.insert({"id": 1, "name": "Ann"})

    assert row == {"id": 1, "email": None, "name": "Ann", "active": None}
    assert list(table.rows[0]) == ["id", "email", "name", "active"]
    assert table.indexes["id"].find(1) == [0]


def test_insert_rejects_null_in_not_null_column():
    table = make_users()
    with pytest.raises(ConstraintError, match="name cannot be null"):
        table.insert({"id": 1})
    assert table.row_count == 0


def test_insert_rejects_null_primary_key():
    table = make_users()
    with pytest.raises(ConstraintError):
        table.insert({"name": "Ann"})


def test_insert_rejects_wrong_type():
    table = make_users()
    with pytest.raises(ColumnTypeError):
        table.insert({"id": "1", "name": "Ann"})
    with pytest.raises(ColumnTypeError):
        table.insert({"id": True, "name": "Ann"})
    with pytest.raises(ColumnTypeError):
        table.insert({"id": 1, "name": "Ann", "active": 1})
    assert table.row_count == 0


def test_duplicate_insert_leaves_table_unchanged():
    table = make_users()
    table.insert({"id": 1, "email": "a@x", "name": "Ann"})

    with pytest.raises(ConstraintError, match="primary key"):
        table.insert({"id": 1, "email": "b@x", "name": "Bob"})
    with pytest.raises(ConstraintError, match="unique"):
        table.insert({"id": 2, "email": "a@x", "name": "Bob"})

    assert table.row_count == 1
    assert table.indexes["id"].find(2) == []
    assert table.indexes["email"].find("b@x") == []
    assert_indexes_match_scan(table)


def test_unique_column_allows_many_nulls():
    table = make_users()
    table.insert({"id": 1, "name": "Ann"})
    table.insert({"id": 2, "name": "Bob"})
    assert table.row_count == 2


def test_select_projection_keeps_row_order():
    table = make_users()
    table.insert({"id": 1, "email": "a@x", "name": "Ann", "active": True})

    assert table.select(["name", "id"]) == [{"id": 1, "name": "Ann"}]
    assert list(table.select(["name", "id"])[0]) == ["id", "name"]
    assert table.select(["*"]) == table.select([]) == table.select()


def test_select_returns_copies():
    table = make_users()
    table.insert({"id": 1, "name": "Ann"})
    table.select()[0]["name"] = "changed"
    assert table.rows[0]["name"] == "Ann"


def test_update_moves_index_entries():
    table = make_users()
    table.insert({"id": 1, "email": "a@x", "name": "Ann"})
    table.insert({"id": 2, "email": "b@x", "name": "Bob"})

    outcome = table.update({"id": 10, "email": "z@x"}, lambda row: row["id"] == 2)

    assert outcome.count == 1
    assert table.find_by_index("id", 10) == [table.rows[1]]
    assert table.find_by_index("id", 2) == []
    assert table.find_by_index("email", "b@x") == []
    assert_indexes_match_scan(table)


def test_update_counts_matched_rows_and_skips_invalid_fields():
    table = make_users()
    table.insert({"id": 1, "name": "Ann"})
    table.insert({"id": 2, "name": "Bob"})

    outcome = table.update({"name": 5, "nosuch": 1, "active": True}, lambda row: True)

    assert outcome.count == 2
    assert [row["name"] for row in table.rows] == ["Ann", "Bob"]
    assert [row["active"] for row in table.rows] == [True, True]
    assert len(outcome.warnings) == 1
    assert "ignored field 'name'" in outcome.warnings[0]


def test_update_strict_mode_raises_before_changing_anything():
    table = make_users()
    table.insert({"id": 1, "name": "Ann"})

    with pytest.raises(ColumnTypeError):
        table.update({"active": True, "name": 5}, lambda row: True, strict=True)
    assert table.rows[0]["active"] is None

    with pytest.raises(ConstraintError):
        table.update({"name": None}, lambda row: True, strict=True)


def test_update_rejects_duplicate_key():
    table = make_users()
    table.insert({"id": 1, "name": "Ann"})
    table.insert({"id": 2, "name": "Bob"})

    with pytest.raises(ConstraintError):
        table.update({"id": 1}, lambda row: row["id"] == 2)
    with pytest.raises(ConstraintError):
        table.update({"id": 7}, lambda row: True)

    assert [row["id"] for row in table.rows] == [1, 2]
    assert_indexes_match_scan(table)


def test_update_to_own_value_is_allowed():
    table = make_users()
    table.insert({"id": 1, "name": "Ann"})
    assert table.update({"id": 1}, lambda row: True).count == 1
    assert table.find_by_index("id", 1) == [table.rows[0]]


def test_delete_rebuilds_indexes_after_positions_shift():
    table = make_users()
    for i in range(1, 7):
        table.insert({"id": i, "email": f"u{i}@x", "name": f"user{i}"})

    deleted = table.delete(lambda row: row["id"] % 2 == 1)

    assert deleted == 3
    assert [row["id"] for row in table.rows] == [2, 4, 6]
    assert table.indexes["id"].find(6) == [2]
    assert table.find_by_index("email", "u4@x") == [table.rows[1]]
    assert table.find_by_index("id", 1) == []
    assert_indexes_match_scan(table)


def test_delete_is_idempotent():
    table = make_users()
    table.insert({"id": 1, "name": "Ann"})
    table.insert({"id": 2, "name": "Bob"})

    assert table.delete(lambda row: row["name"] == "Ann") == 1
    assert table.delete(lambda row: row["name"] == "Ann") == 0
    assert table.row_count == 1


def test_find_by_index_on_plain_column_is_empty():
    table = make_users()
    table.insert({"id": 1, "name": "Ann"})
    assert table.find_by_index("name", "Ann") == []


def test_index_matches_scan_after_mixed_mutations():
    table = make_users()
    for i in range(10):
        table.insert({"id": i, "email": f"{i}@x", "name": "n"})
    table.update({"email": "moved@x"}, lambda row: row["id"] == 3)
    table.delete(lambda row: row["id"] in (0, 4, 5))
    table.insert({"id": 4, "email": "again@x", "name": "n"})
    table.update({"id": 100}, lambda row: row["id"] == 9)
    table.delete(lambda row: row["email"] == "moved@x")

    assert [row["id"] for row in table.rows] == [1, 2, 6, 7, 8, 100, 4]
    assert_indexes_match_scan(table)
