import pytest

from minirdbms.database import Database
from minirdbms.errors import SchemaError
from minirdbms.types import Column, DataType, TableSchema


def schema(name, *columns):
    return TableSchema(name=name, columns=list(columns))


def test_create_resolves_primary_key():
    db = Database()
    table = db.create_table(schema(
        "t",
        Column("id", DataType.NUMBER, is_primary=True),
        Column("name", DataType.STRING),
    ))

    assert table.schema.primary_key == "id"
    assert set(table.indexes) == {"id"}
    assert db.has_table("t")
    assert db.get_table("t") is table


def test_create_without_primary_key():
    db = Database()
    table = db.create_table(schema("t", Column("name", DataType.STRING, is_unique=True)))
    assert table.schema.primary_key is None
    assert set(table.indexes) == {"name"}


def test_create_rejects_existing_name():
    db = Database()
    db.create_table(schema("t", Column("a", DataType.STRING)))
    with pytest.raises(SchemaError, match="already exists"):
        db.create_table(schema("t", Column("b", DataType.STRING)))


def test_create_rejects_multiple_primary_keys():
    db = Database()
    with pytest.raises(SchemaError, match="Multiple primary keys"):
        db.create_table(schema(
            "t",
            Column("a", DataType.NUMBER, is_primary=True),
            Column("b", DataType.NUMBER, is_primary=True),
        ))
    assert not db.has_table("t")


def test_create_rejects_duplicate_column_names():
    db = Database()
    with pytest.raises(SchemaError, match="Duplicate column"):
        db.create_table(schema("t", Column("a", DataType.STRING), Column("a", DataType.NUMBER)))


def test_drop_table():
    db = Database()
    db.create_table(schema("t", Column("a", DataType.STRING)))
    db.drop_table("t")

    assert not db.has_table("t")
    assert db.get_table("t") is None
    with pytest.raises(SchemaError, match="does not exist"):
        db.drop_table("t")


def test_list_tables_in_creation_order():
    db = Database()
    for name in ("b", "a", "c"):
        db.create_table(schema(name, Column("x", DataType.STRING)))
    assert db.list_tables() == ["b", "a", "c"]


def test_require_table():
    db = Database()
    with pytest.raises(SchemaError, match="Table missing does not exist"):
        db.require_table("missing")


def test_databases_are_independent():
    first, second = Database(), Database()
    first.create_table(schema("t", Column("a", DataType.STRING)))
    assert not second.has_table("t")
