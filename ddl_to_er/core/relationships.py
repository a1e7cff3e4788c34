"""
Relationship and cardinality inference from foreign key columns
"""
import logging
from typing import Optional

from .schema_model import Column, Relationship, Schema
from .sql_patterns import Cardinality

logger = logging.getLogger(__name__)


def determine_cardinality(from_column: Optional[Column], to_column: Optional[Column]) -> str:
    """
    Classify a foreign key link.

    referenced PK + referencing unique/PK -> ONE_TO_ONE
    referenced PK                          -> MANY_TO_ONE
    both ends unique                       -> ONE_TO_ONE
    otherwise                              -> MANY_TO_MANY
    """
    if from_column is None or to_column is None:
        return Cardinality.UNKNOWN

    if to_column.is_primary_key:
        if from_column.is_unique or from_column.is_primary_key:
            return Cardinality.ONE_TO_ONE
        return Cardinality.MANY_TO_ONE

    if from_column.is_unique and to_column.is_unique:
        return Cardinality.ONE_TO_ONE

    return Cardinality.MANY_TO_MANY


def extract_relationships(schema: Schema):
    """Emit one Relationship per foreign key column whose target table and column resolve"""
    for table_name, table in schema.tables.items():
        for column_name, column in table.columns.items():
            if not column.is_foreign_key or column.references is None:
                continue

            target_table = schema.tables.get(column.references.table)
            target_column = target_table.get_column(column.references.column) if target_table else None

            cardinality = determine_cardinality(column, target_column)
            if cardinality == Cardinality.UNKNOWN:
                # 悬空引用由 validator 报告
                logger.debug(f"Unresolved reference {table_name}.{column_name} -> {column.references}")
                continue

            schema.relationships.append(Relationship(
                from_table=table_name,
                from_column=column_name,
                to_table=column.references.table,
                to_column=column.references.column,
                cardinality=cardinality
            ))
