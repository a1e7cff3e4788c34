"""
Schema validation - runs after every table is parsed so forward references resolve
"""
from .schema_model import Schema
from .sql_patterns import ParsingErrorTypes, VALIDATION_RULES


def validate_schema(schema: Schema):
    """Append MISSING_REFERENCE and INVALID_TABLE_NAME errors; never removes anything"""
    for table_name, table in schema.tables.items():
        for column in table.columns.values():
            if not column.is_foreign_key or column.references is None:
                continue

            ref = column.references
            target = schema.tables.get(ref.table)
            if target is None:
                schema.add_error(
                    ParsingErrorTypes.MISSING_REFERENCE,
                    f"Referenced table '{ref.table}' not found",
                    table_name
                )
            elif target.get_column(ref.column) is None:
                schema.add_error(
                    ParsingErrorTypes.MISSING_REFERENCE,
                    f"Referenced column '{ref.column}' not found in table '{ref.table}'",
                    table_name
                )

    for table_name in schema.tables:
        if (not VALIDATION_RULES['TABLE_NAME'].match(table_name)
                or len(table_name) > VALIDATION_RULES['MAX_TABLE_NAME_LENGTH']):
            schema.add_error(
                ParsingErrorTypes.INVALID_TABLE_NAME,
                f"Invalid table name: {table_name}",
                table_name
            )
