"""
Tests for table-level constraint clauses and inline column constraints.
"""
from ddl_to_er.core import parse_sql
from ddl_to_er.core.schema_model import (
    PrimaryKeyConstraint, ForeignKeyConstraint, UniqueConstraint, CheckConstraint
)
from ddl_to_er.core.sql_patterns import ParsingErrorTypes


def _error_types(schema):
    return [e.type for e in schema.errors]


def test_composite_primary_key_marks_columns():
    schema = parse_sql("""
        CREATE TABLE OrderItems (
            OrderID int,
            LineNo int,
            Qty int,
            CONSTRAINT PK_OrderItems PRIMARY KEY CLUSTERED (OrderID ASC, LineNo ASC)
        );
    """)
    table = schema.tables["OrderItems"]

    assert schema.success
    assert table.columns["OrderID"].is_primary_key
    assert table.columns["LineNo"].is_primary_key
    assert not table.columns["OrderID"].is_nullable
    assert not table.columns["Qty"].is_primary_key

    [pk] = table.constraints
    assert isinstance(pk, PrimaryKeyConstraint)
    assert pk.name == "PK_OrderItems"
    assert pk.columns == ["OrderID", "LineNo"]


def test_constraint_before_columns_still_resolves():
    """Constraint clauses are resolved after every column of the table exists."""
    schema = parse_sql("CREATE TABLE T (PRIMARY KEY (b), a int, b int);")

    assert schema.success
    assert schema.tables["T"].columns["b"].is_primary_key


def test_primary_key_with_missing_column():
    schema = parse_sql("CREATE TABLE T (a int, PRIMARY KEY (a, ghost));")
    table = schema.tables["T"]

    assert _error_types(schema) == [ParsingErrorTypes.MISSING_COLUMN]
    assert table.columns["a"].is_primary_key
    # 复合主键仍然记录
    assert table.constraints[0].columns == ["a", "ghost"]
    assert table.constraints[0].name == "PK_T"


def test_foreign_key_constraint_details(shop_ddl):
    schema = parse_sql(shop_ddl)
    orders = schema.tables["Orders"]

    [fk] = [c for c in orders.constraints if isinstance(c, ForeignKeyConstraint)]
    assert fk.name == "FK_Orders_Users"
    assert (fk.column_name, fk.referenced_table, fk.referenced_column) == ("UserID", "Users", "ID")
    assert fk.on_delete == "CASCADE"
    assert fk.on_update == "NO_ACTION"
    assert orders.columns["UserID"].is_foreign_key
    assert orders.columns["UserID"].references.table == "Users"


def test_foreign_key_default_name_and_actions():
    schema = parse_sql("""
        CREATE TABLE A (id int PRIMARY KEY);
        CREATE TABLE B (
            a_id int,
            FOREIGN KEY (a_id) REFERENCES dbo.A(id) ON UPDATE SET NULL ON DELETE NO ACTION
        );
    """)
    [fk] = schema.tables["B"].constraints

    assert fk.name == "FK_B_a_id"
    assert fk.referenced_table == "A"
    assert fk.on_update == "SET_NULL"
    assert fk.on_delete == "NO_ACTION"
    assert fk.to_dict()["onUpdate"] == "SET_NULL"


def test_composite_foreign_key_pairs_columns():
    schema = parse_sql("""
        CREATE TABLE Parent (x int, y int, PRIMARY KEY (x, y));
        CREATE TABLE Child (px int, py int, FOREIGN KEY (px, py) REFERENCES Parent (x, y));
    """)
    child = schema.tables["Child"]

    assert schema.success
    assert child.columns["px"].references.column == "x"
    assert child.columns["py"].references.column == "y"
    assert [(r.from_column, r.to_column) for r in schema.relationships] == [("px", "x"), ("py", "y")]


def test_foreign_key_column_count_mismatch():
    schema = parse_sql("CREATE TABLE C (a int, b int, FOREIGN KEY (a, b) REFERENCES P (x));")

    assert _error_types(schema) == [ParsingErrorTypes.INVALID_CONSTRAINT]
    assert schema.tables["C"].constraints == []
    assert not schema.tables["C"].columns["a"].is_foreign_key


def test_foreign_key_missing_local_column():
    schema = parse_sql("""
        CREATE TABLE P (id int PRIMARY KEY);
        CREATE TABLE C (a int, FOREIGN KEY (ghost) REFERENCES P(id));
    """)

    assert _error_types(schema) == [ParsingErrorTypes.MISSING_COLUMN]
    assert schema.tables["C"].constraints == []
    assert schema.relationships == []


def test_malformed_foreign_key():
    schema = parse_sql("CREATE TABLE C (a int, FOREIGN KEY (a) REFERENCES);")

    assert _error_types(schema) == [ParsingErrorTypes.INVALID_CONSTRAINT]
    assert schema.errors[0].table_name == "C"


def test_unique_constraint_variants():
    schema = parse_sql("""
        CREATE TABLE T (
            a int,
            b int,
            c int,
            UNIQUE (a, b),
            CONSTRAINT UQ_T_c UNIQUE KEY uk_c (c)
        );
    """)
    table = schema.tables["T"]
    uniques = [c for c in table.constraints if isinstance(c, UniqueConstraint)]

    assert schema.success
    assert [u.name for u in uniques] == ["UQ_T_a_b", "UQ_T_c"]
    assert all(table.columns[name].is_unique for name in ("a", "b", "c"))


def test_unique_constraint_missing_column():
    schema = parse_sql("CREATE TABLE T (a int, UNIQUE (z));")

    assert _error_types(schema) == [ParsingErrorTypes.MISSING_COLUMN]


def test_check_constraints_keep_condition_verbatim():
    schema = parse_sql("""
        CREATE TABLE Products (
            Price decimal(10,2) CHECK (Price > 0),
            Kind varchar(10),
            CONSTRAINT CK_Kind CHECK (Kind IN ('a', 'b(c)')),
            CHECK ((Price < 1000) OR (Kind = 'b'))
        );
    """)
    checks = [c for c in schema.tables["Products"].constraints if isinstance(c, CheckConstraint)]

    assert schema.success
    assert [(c.name, c.condition) for c in checks] == [
        ("CK_Products_1", "Price > 0"),
        ("CK_Kind", "Kind IN ('a', 'b(c)')"),
        ("CK_Products_3", "(Price < 1000) OR (Kind = 'b')"),
    ]


def test_empty_check_is_invalid():
    schema = parse_sql("CREATE TABLE T (a int, CHECK ());")

    assert _error_types(schema) == [ParsingErrorTypes.INVALID_CONSTRAINT]


def test_unknown_constraint_is_a_warning():
    schema = parse_sql("CREATE TABLE T (a int, CONSTRAINT DF_T_a DEFAULT 0 FOR a);")

    assert schema.success
    assert [w.type for w in schema.warnings] == [ParsingErrorTypes.UNKNOWN_CONSTRAINT]
    assert schema.warnings[0].table_name == "T"


def test_constraint_keywords_inside_literals_are_ignored():
    """Keywords inside string literals do not set column flags."""
    schema = parse_sql("CREATE TABLE T (note varchar(40) DEFAULT 'PRIMARY KEY UNIQUE NOT NULL');")
    column = schema.tables["T"].columns["note"]

    assert not column.is_primary_key
    assert not column.is_unique
    assert column.is_nullable
    assert column.default_value == "'PRIMARY KEY UNIQUE NOT NULL'"


def test_constraint_dicts():
    schema = parse_sql("CREATE TABLE T (a int, b int, PRIMARY KEY (a), CHECK (b > 1));")
    assert [c.to_dict() for c in schema.tables["T"].constraints] == [
        {"type": "PRIMARY_KEY", "name": "PK_T", "columns": ["a"]},
        {"type": "CHECK", "name": "CK_T_1", "condition": "b > 1"},
    ]


def test_alter_table_adds_foreign_keys():
    """Constraints added by ALTER TABLE feed relationships like inline ones."""
    schema = parse_sql("""
        CREATE TABLE [dbo].[Users] ([ID] [int] NOT NULL, CONSTRAINT [PK_Users] PRIMARY KEY CLUSTERED ([ID] ASC));
        CREATE TABLE [dbo].[Orders] ([OrderID] [int] NOT NULL, [UserID] [int] NULL);
        ALTER TABLE [dbo].[Orders] WITH CHECK ADD CONSTRAINT [FK_Orders_Users] FOREIGN KEY([UserID])
            REFERENCES [dbo].[Users] ([ID]);
        ALTER TABLE [dbo].[Orders] CHECK CONSTRAINT [FK_Orders_Users];
        ALTER TABLE Orders ADD PRIMARY KEY (OrderID), ADD CHECK (OrderID > 0);
    """)
    orders = schema.tables["Orders"]

    assert schema.success
    assert [c.kind for c in orders.constraints] == ["FOREIGN_KEY", "PRIMARY_KEY", "CHECK"]
    assert orders.constraints[0].name == "FK_Orders_Users"
    assert orders.columns["OrderID"].is_primary_key
    assert [(r.from_table, r.to_table, r.cardinality) for r in schema.relationships] == [
        ("Orders", "Users", "MANY_TO_ONE")
    ]


def test_alter_table_on_unknown_table():
    schema = parse_sql("ALTER TABLE Ghost ADD CONSTRAINT FK_G FOREIGN KEY (a) REFERENCES T(b);")

    assert _error_types(schema) == [ParsingErrorTypes.MISSING_REFERENCE]
    assert schema.errors[0].table_name == "Ghost"


def test_inline_check_body_does_not_set_column_flags():
    """NOT NULL and UNIQUE inside a CHECK condition belong to the condition."""
    schema = parse_sql(
        "CREATE TABLE T (a int CHECK (a IS NOT NULL OR 1 = 1), b int CHECK (b > 0) UNIQUE NOT NULL);"
    )
    table = schema.tables["T"]
    checks = [c for c in table.constraints if isinstance(c, CheckConstraint)]

    assert schema.success
    assert table.columns["a"].is_nullable
    assert not table.columns["a"].is_unique
    assert table.columns["b"].is_unique
    assert not table.columns["b"].is_nullable
    assert [c.condition for c in checks] == ["a IS NOT NULL OR 1 = 1", "b > 0"]
