"""
DDL parser - turns CREATE TABLE / CREATE INDEX text into a validated Schema
"""
import logging
import time
from typing import List

from .column_parser import parse_column_definition
from .constraint_parser import parse_constraint_definition
from .preprocessor import (
    preprocess_sql, split_statements, split_clauses, extract_parenthesized,
    clean_identifier, clean_qualified_identifier, split_column_list
)
from .relationships import extract_relationships
from .schema_model import Schema, Table, Index
from .sql_patterns import (
    CREATE_TABLE_KEYWORD, CREATE_TABLE_HEAD, CREATE_INDEX, CONSTRAINT_CLAUSE,
    ALTER_TABLE_ADD, ADD_PREFIX, ParsingErrorTypes
)
from .validator import validate_schema

logger = logging.getLogger(__name__)


def parse_sql(sql: str) -> Schema:
    """
    Parse SQL DDL into a Schema.

    Never raises: invalid input or an unexpected failure yields an empty
    Schema carrying a single SYNTAX_ERROR. Every call builds fresh state.
    """
    start_time = time.perf_counter()

    if not isinstance(sql, str):
        return _failed_schema('Invalid SQL content provided')

    try:
        schema = Schema()

        cleaned_sql = preprocess_sql(sql)
        statements = split_statements(cleaned_sql)
        logger.debug(f"Split SQL into {len(statements)} statement(s)")

        extract_tables(statements, schema)
        extract_alter_constraints(statements, schema)
        extract_indexes(cleaned_sql, schema)
        extract_relationships(schema)
        validate_schema(schema)

        schema.calculate_stats()
        schema.stats.parse_time = round((time.perf_counter() - start_time) * 1000)
        return schema

    except Exception as e:
        logger.exception(f"Unexpected error while parsing SQL: {e}")
        return _failed_schema(str(e) or type(e).__name__)


def _failed_schema(message: str) -> Schema:
    schema = Schema()
    schema.add_error(ParsingErrorTypes.SYNTAX_ERROR, message)
    return schema


def extract_tables(statements: List[str], schema: Schema):
    """Parse every CREATE TABLE statement; the first definition of a name wins"""
    for statement in statements:
        if not CREATE_TABLE_KEYWORD.search(statement):
            continue

        head = CREATE_TABLE_HEAD.search(statement)
        group = extract_parenthesized(statement, head.end() - 1) if head else None
        if not group:
            logger.debug(f"Failed to match CREATE TABLE in statement: {statement}")
            continue

        table_name = clean_qualified_identifier(head.group(1))
        body = group[0]

        if table_name in schema.tables:
            schema.add_error(
                ParsingErrorTypes.DUPLICATE_TABLE,
                f"Duplicate table definition: {table_name}",
                table_name
            )
            continue

        table = Table(table_name)
        try:
            parse_table_content(table, body, schema)
        except Exception as e:
            logger.exception(f"Error processing table {table_name}")
            schema.add_error(
                ParsingErrorTypes.SYNTAX_ERROR,
                f"Error processing table: {e}",
                table_name
            )
            continue

        schema.tables[table_name] = table
        logger.debug(f"Processed table {table_name} with {len(table.columns)} column(s)")


def parse_table_content(table: Table, body: str, schema: Schema):
    """
    Split the table body into clauses and build the table in two phases:
    columns first, then table-level constraints resolved against them.
    """
    column_clauses = []
    constraint_clauses = []
    for clause in split_clauses(body):
        if CONSTRAINT_CLAUSE.match(clause):
            constraint_clauses.append(clause)
        else:
            column_clauses.append(clause)

    for clause in column_clauses:
        parse_column_definition(table, clause, schema)

    for clause in constraint_clauses:
        parse_constraint_definition(table, clause, schema)


def extract_alter_constraints(statements: List[str], schema: Schema):
    """
    Apply ALTER TABLE ... ADD [CONSTRAINT name] FOREIGN KEY / PRIMARY KEY / UNIQUE / CHECK
    to tables that were already created. Other ALTER clauses are skipped.
    """
    for statement in statements:
        match = ALTER_TABLE_ADD.match(statement)
        if not match:
            continue

        table_name = clean_qualified_identifier(match.group(1))
        table = schema.tables.get(table_name)
        if table is None:
            schema.add_error(
                ParsingErrorTypes.MISSING_REFERENCE,
                f"ALTER TABLE target '{table_name}' not found",
                table_name
            )
            continue

        for clause in split_clauses(match.group(2)):
            clause = ADD_PREFIX.sub('', clause)
            if CONSTRAINT_CLAUSE.match(clause):
                parse_constraint_definition(table, clause, schema)
            else:
                logger.debug(f"Skipping unsupported ALTER TABLE clause on {table_name}: {clause}")


def extract_indexes(sql: str, schema: Schema):
    """
    Find CREATE [UNIQUE] INDEX statements anywhere in the document.

    A repeated index name replaces the earlier definition and is reported as a warning.
    """
    for match in CREATE_INDEX.finditer(sql):
        index = Index(
            name=clean_identifier(match.group(2)),
            table_name=clean_qualified_identifier(match.group(3)),
            columns=split_column_list(match.group(4)),
            is_unique=bool(match.group(1))
        )

        previous = schema.indexes.get(index.name)
        if previous is not None:
            schema.add_warning(
                ParsingErrorTypes.DUPLICATE_INDEX,
                f"Duplicate index definition: {index.name} (later definition replaces the earlier one)",
                index.table_name
            )
            previous_table = schema.tables.get(previous.table_name)
            if previous_table is not None and previous in previous_table.indexes:
                previous_table.indexes.remove(previous)

        schema.indexes[index.name] = index

        table = schema.tables.get(index.table_name)
        if table is not None:
            table.indexes.append(index)
        else:
            logger.debug(f"Index {index.name} refers to unknown table {index.table_name}")
