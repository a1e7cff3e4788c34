"""
Tests for post-parse schema validation.
"""
from ddl_to_er.core.schema_model import Schema, Table, Column, DataType
from ddl_to_er.core.sql_patterns import ParsingErrorTypes
from ddl_to_er.core.validator import validate_schema


def _schema_with(*tables):
    schema = Schema()
    for table in tables:
        schema.tables[table.name] = table
    return schema


def _table(name, *columns):
    table = Table(name)
    for column in columns:
        table.add_column(column)
    return table


def test_valid_schema_has_no_errors():
    target = Column("ID", DataType("INT"))
    source = Column("UserID", DataType("INT"))
    source.mark_foreign_key("Users", "ID")
    schema = _schema_with(_table("Users", target), _table("Orders", source))

    validate_schema(schema)

    assert schema.errors == []


def test_missing_table_and_column():
    ghost = Column("GhostID", DataType("INT"))
    ghost.mark_foreign_key("Ghost", "ID")
    bad_column = Column("UserCode", DataType("INT"))
    bad_column.mark_foreign_key("Users", "Code")
    schema = _schema_with(_table("Users", Column("ID", DataType("INT"))), _table("Orders", ghost, bad_column))

    validate_schema(schema)

    assert [(e.type, e.table_name) for e in schema.errors] == [
        (ParsingErrorTypes.MISSING_REFERENCE, "Orders"),
        (ParsingErrorTypes.MISSING_REFERENCE, "Orders"),
    ]
    # 校验只追加错误，不删除任何表
    assert list(schema.tables) == ["Users", "Orders"]


def test_table_name_rule():
    schema = _schema_with(_table("ok_name"), _table("1bad"), _table("has-dash"), _table("_fine2"))

    validate_schema(schema)

    assert [e.table_name for e in schema.errors] == ["1bad", "has-dash"]
    assert all(e.type == ParsingErrorTypes.INVALID_TABLE_NAME for e in schema.errors)
