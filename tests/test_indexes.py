"""
Tests for CREATE INDEX extraction.
"""
from ddl_to_er.core import parse_sql
from ddl_to_er.core.sql_patterns import ParsingErrorTypes


def test_unique_index_with_sort_order(shop_ddl):
    schema = parse_sql(shop_ddl)
    index = schema.indexes["UX_Orders_User_Status"]

    assert index.is_unique
    assert index.columns == ["UserID", "Status"]
    assert schema.tables["Orders"].indexes == [index]


def test_index_before_table_is_attached():
    """Indexes are collected after all tables, so declaration order does not matter."""
    schema = parse_sql("CREATE INDEX IX_T_a ON T (a); CREATE TABLE T (a int);")

    assert schema.tables["T"].indexes == [schema.indexes["IX_T_a"]]


def test_index_on_unknown_table_is_kept():
    schema = parse_sql("CREATE NONCLUSTERED INDEX [IX_Ghost] ON [dbo].[Ghost] ([x] DESC);")

    assert schema.success
    index = schema.indexes["IX_Ghost"]
    assert index.table_name == "Ghost"
    assert index.columns == ["x"]
    assert schema.stats.total_indexes == 1


def test_duplicate_index_replaces_earlier_definition():
    schema = parse_sql("""
        CREATE TABLE A (x int);
        CREATE TABLE B (y int);
        CREATE INDEX IX_dup ON A (x);
        CREATE UNIQUE INDEX IX_dup ON B (y);
    """)

    assert schema.success
    assert [w.type for w in schema.warnings] == [ParsingErrorTypes.DUPLICATE_INDEX]

    index = schema.indexes["IX_dup"]
    assert index.table_name == "B"
    assert index.is_unique
    assert schema.tables["A"].indexes == []
    assert schema.tables["B"].indexes == [index]
    assert schema.stats.total_indexes == 1


def test_index_dict():
    schema = parse_sql("CREATE TABLE T (a int, b int); CREATE INDEX IX_T ON T (a, b);")
    assert schema.tables["T"].to_dict()["indexes"] == [
        {"name": "IX_T", "tableName": "T", "columns": ["a", "b"], "isUnique": False}
    ]
