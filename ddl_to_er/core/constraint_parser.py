"""
Constraint clause parser - resolves table-level PRIMARY KEY / FOREIGN KEY / UNIQUE / CHECK
clauses against the columns already parsed for the same table
"""
import logging
import re
from typing import Optional

from .preprocessor import (
    clean_identifier, clean_qualified_identifier, extract_parenthesized, mask_quoted, split_column_list
)
from .schema_model import (
    Table, Schema, PrimaryKeyConstraint, ForeignKeyConstraint, UniqueConstraint, CheckConstraint
)
from .sql_patterns import TABLE_PATTERNS, ParsingErrorTypes

logger = logging.getLogger(__name__)


def parse_constraint_definition(table: Table, definition: str, schema: Schema):
    """
    Dispatch a constraint clause by keyword: FOREIGN KEY, PRIMARY KEY, UNIQUE, then CHECK.
    Anything else is reported as an UNKNOWN_CONSTRAINT warning.
    """
    masked = mask_quoted(definition)

    declared_name = None
    name_match = TABLE_PATTERNS['CONSTRAINT_NAME'].match(masked)
    if name_match:
        declared_name = clean_identifier(definition[name_match.start(1):name_match.end(1)])

    if TABLE_PATTERNS['FOREIGN_KEY'].search(masked):
        parse_foreign_key_constraint(table, definition, schema, declared_name)
    elif TABLE_PATTERNS['PRIMARY_KEY'].search(masked):
        parse_primary_key_constraint(table, definition, schema, declared_name)
    elif TABLE_PATTERNS['UNIQUE'].search(masked):
        parse_unique_constraint(table, definition, schema, declared_name)
    elif TABLE_PATTERNS['CHECK'].search(masked):
        parse_check_constraint(table, definition, schema, declared_name)
    else:
        schema.add_warning(
            ParsingErrorTypes.UNKNOWN_CONSTRAINT,
            f"Unknown constraint type: {definition}",
            table.name
        )


def _referential_action(pattern: re.Pattern, definition: str) -> str:
    match = pattern.search(definition)
    if not match:
        return 'NO_ACTION'
    return re.sub(r'\s+', '_', match.group(1).upper())


def parse_foreign_key_constraint(table: Table, definition: str, schema: Schema,
                                 declared_name: Optional[str] = None):
    """
    FOREIGN KEY (col[, ...]) REFERENCES table (col[, ...]) [ON DELETE ...] [ON UPDATE ...]

    The referenced table is not checked here, so forward references are allowed.
    """
    match = TABLE_PATTERNS['FOREIGN_KEY_CONSTRAINT'].search(definition)
    if not match:
        schema.add_error(
            ParsingErrorTypes.INVALID_CONSTRAINT,
            f"Invalid FOREIGN KEY syntax: {definition}",
            table.name
        )
        return

    local_columns = split_column_list(match.group(1))
    referenced_table = clean_qualified_identifier(match.group(2))
    referenced_columns = split_column_list(match.group(3))

    if not local_columns or len(local_columns) != len(referenced_columns):
        schema.add_error(
            ParsingErrorTypes.INVALID_CONSTRAINT,
            f"FOREIGN KEY column count does not match referenced columns: {definition}",
            table.name
        )
        return

    tail = definition[match.end():]
    on_delete = _referential_action(TABLE_PATTERNS['ON_DELETE'], tail)
    on_update = _referential_action(TABLE_PATTERNS['ON_UPDATE'], tail)

    for column_name, referenced_column in zip(local_columns, referenced_columns):
        column = table.get_column(column_name)
        if column is None:
            schema.add_error(
                ParsingErrorTypes.MISSING_COLUMN,
                f"Foreign key column '{column_name}' not found in table '{table.name}'",
                table.name
            )
            continue

        column.mark_foreign_key(referenced_table, referenced_column)
        table.constraints.append(ForeignKeyConstraint(
            declared_name or f"FK_{table.name}_{column_name}",
            column_name,
            referenced_table,
            referenced_column,
            on_delete=on_delete,
            on_update=on_update
        ))
        logger.debug(f"Marked column as FK: {table.name}.{column_name} -> "
                     f"{referenced_table}.{referenced_column}")


def parse_primary_key_constraint(table: Table, definition: str, schema: Schema,
                                 declared_name: Optional[str] = None):
    """PRIMARY KEY [CLUSTERED|NONCLUSTERED] (col[, ...])"""
    match = TABLE_PATTERNS['PRIMARY_KEY_CONSTRAINT'].search(definition)
    columns = split_column_list(match.group(1)) if match else []
    if not columns:
        schema.add_error(
            ParsingErrorTypes.INVALID_CONSTRAINT,
            f"Invalid PRIMARY KEY syntax: {definition}",
            table.name
        )
        return

    for column_name in columns:
        column = table.get_column(column_name)
        if column is None:
            schema.add_error(
                ParsingErrorTypes.MISSING_COLUMN,
                f"Primary key column '{column_name}' not found in table '{table.name}'",
                table.name
            )
            continue
        column.mark_primary_key()

    # 部分列缺失时仍然记录复合主键
    table.constraints.append(PrimaryKeyConstraint(declared_name or f"PK_{table.name}", columns))


def parse_unique_constraint(table: Table, definition: str, schema: Schema,
                            declared_name: Optional[str] = None):
    """UNIQUE [KEY|INDEX] [name] (col[, ...])"""
    match = TABLE_PATTERNS['UNIQUE_CONSTRAINT'].search(definition)
    columns = split_column_list(match.group(1)) if match else []
    if not columns:
        schema.add_error(
            ParsingErrorTypes.INVALID_CONSTRAINT,
            f"Invalid UNIQUE syntax: {definition}",
            table.name
        )
        return

    for column_name in columns:
        column = table.get_column(column_name)
        if column is None:
            schema.add_error(
                ParsingErrorTypes.MISSING_COLUMN,
                f"Unique constraint column '{column_name}' not found in table '{table.name}'",
                table.name
            )
            continue
        column.is_unique = True

    table.constraints.append(UniqueConstraint(
        declared_name or f"UQ_{table.name}_{'_'.join(columns)}", columns
    ))


def parse_check_constraint(table: Table, definition: str, schema: Schema,
                           declared_name: Optional[str] = None):
    """CHECK (condition) - the condition is kept verbatim and never evaluated"""
    match = TABLE_PATTERNS['CHECK_OPEN'].search(mask_quoted(definition))
    group = extract_parenthesized(definition, match.end() - 1) if match else None
    if not group or not group[0].strip():
        schema.add_error(
            ParsingErrorTypes.INVALID_CONSTRAINT,
            f"Invalid CHECK syntax: {definition}",
            table.name
        )
        return

    name = declared_name or f"CK_{table.name}_{table.check_constraint_count() + 1}"
    table.constraints.append(CheckConstraint(name, group[0].strip()))
