"""
Schema Model Classes - Represent parsed tables, columns, constraints, indexes and relationships
"""
from typing import Dict, List, Optional, Any, Union

from .sql_patterns import DATA_TYPE_MAPPINGS, TYPE_CATEGORIES


class DataType:
    """A column type split into base type, size and scale"""

    def __init__(self, base_type: str, size: Optional[int] = None, scale: Optional[int] = None,
                 full_type: Optional[str] = None):
        self.base_type = base_type
        self.size = size
        self.scale = scale
        self.full_type = full_type or base_type
        self.mapping = DATA_TYPE_MAPPINGS.get(base_type)

    @property
    def category(self) -> str:
        """Coarse category: NUMERIC, TEXT, TEMPORAL, BOOLEAN, BINARY, IDENTIFIER, OTHER or UNKNOWN"""
        if not self.mapping:
            return 'UNKNOWN'
        return TYPE_CATEGORIES.get(self.mapping['category'], 'OTHER')

    def display(self) -> str:
        if self.size is not None and self.scale is not None:
            return f"{self.base_type}({self.size},{self.scale})"
        if self.size is not None:
            return f"{self.base_type}({self.size})"
        return self.full_type

    def to_dict(self) -> Dict[str, Any]:
        return {
            'baseType': self.base_type,
            'size': self.size,
            'scale': self.scale,
            'fullType': self.full_type,
            'mapping': dict(self.mapping) if self.mapping else None,
        }

    def __repr__(self):
        return f"DataType({self.full_type})"


class ColumnReference:
    """Target of a foreign key column"""

    def __init__(self, table: str, column: str):
        self.table = table
        self.column = column

    def to_dict(self) -> Dict[str, str]:
        return {'table': self.table, 'column': self.column}

    def __repr__(self):
        return f"{self.table}.{self.column}"


class Column:
    """A column of a table. Flags may be set later by table-level constraints."""

    def __init__(self, name: str, data_type: DataType):
        self.name = name
        self.data_type = data_type
        self.is_nullable = True
        self.is_primary_key = False
        self.is_foreign_key = False
        self.is_unique = False
        self.is_identity = False
        self.identity_seed: Optional[int] = None
        self.identity_increment: Optional[int] = None
        self.default_value: Optional[str] = None
        self.references: Optional[ColumnReference] = None

    def mark_primary_key(self):
        self.is_primary_key = True
        # 主键不能为空
        self.is_nullable = False

    def mark_foreign_key(self, table: str, column: str):
        self.is_foreign_key = True
        self.references = ColumnReference(table, column)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'dataType': self.data_type.to_dict(),
            'isNullable': self.is_nullable,
            'isPrimaryKey': self.is_primary_key,
            'isForeignKey': self.is_foreign_key,
            'isUnique': self.is_unique,
            'isIdentity': self.is_identity,
            'identitySeed': self.identity_seed,
            'identityIncrement': self.identity_increment,
            'defaultValue': self.default_value,
            'references': self.references.to_dict() if self.references else None,
        }

    def __repr__(self):
        pk_str = " [PK]" if self.is_primary_key else ""
        fk_str = f" -> {self.references}" if self.references else ""
        return f"Column(name={self.name}{pk_str}, type={self.data_type.full_type}{fk_str})"


class PrimaryKeyConstraint:
    kind = 'PRIMARY_KEY'

    def __init__(self, name: str, columns: List[str]):
        self.name = name
        self.columns = columns

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.kind, 'name': self.name, 'columns': list(self.columns)}


class ForeignKeyConstraint:
    kind = 'FOREIGN_KEY'

    def __init__(self, name: str, column_name: str, referenced_table: str, referenced_column: str,
                 on_delete: str = 'NO_ACTION', on_update: str = 'NO_ACTION'):
        self.name = name
        self.column_name = column_name
        self.referenced_table = referenced_table
        self.referenced_column = referenced_column
        self.on_delete = on_delete
        self.on_update = on_update

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.kind,
            'name': self.name,
            'columnName': self.column_name,
            'referencedTable': self.referenced_table,
            'referencedColumn': self.referenced_column,
            'onDelete': self.on_delete,
            'onUpdate': self.on_update,
        }


class UniqueConstraint:
    kind = 'UNIQUE'

    def __init__(self, name: str, columns: List[str]):
        self.name = name
        self.columns = columns

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.kind, 'name': self.name, 'columns': list(self.columns)}


class CheckConstraint:
    kind = 'CHECK'

    def __init__(self, name: str, condition: str):
        self.name = name
        self.condition = condition

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.kind, 'name': self.name, 'condition': self.condition}


Constraint = Union[PrimaryKeyConstraint, ForeignKeyConstraint, UniqueConstraint, CheckConstraint]


class Index:
    """A CREATE INDEX definition. Owned by the Schema, referenced from its Table."""

    def __init__(self, name: str, table_name: str, columns: List[str], is_unique: bool = False):
        self.name = name
        self.table_name = table_name
        self.columns = columns
        self.is_unique = is_unique

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'tableName': self.table_name,
            'columns': list(self.columns),
            'isUnique': self.is_unique,
        }

    def __repr__(self):
        unique_str = "UNIQUE " if self.is_unique else ""
        return f"Index({unique_str}{self.name} ON {self.table_name}({', '.join(self.columns)}))"


class Table:
    """A parsed CREATE TABLE. Columns keep declaration order."""

    def __init__(self, name: str):
        self.name = name
        self.columns: Dict[str, Column] = {}
        self.constraints: List[Constraint] = []
        self.indexes: List[Index] = []

    def add_column(self, column: Column):
        self.columns[column.name] = column

    def get_column(self, name: str) -> Optional[Column]:
        return self.columns.get(name)

    def check_constraint_count(self) -> int:
        return sum(1 for c in self.constraints if isinstance(c, CheckConstraint))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'columns': {name: col.to_dict() for name, col in self.columns.items()},
            'constraints': [c.to_dict() for c in self.constraints],
            'indexes': [idx.to_dict() for idx in self.indexes],
        }

    def __repr__(self):
        return f"Table(name={self.name}, columns={len(self.columns)})"


class Relationship:
    """A foreign key link between two resolved columns"""

    def __init__(self, from_table: str, from_column: str, to_table: str, to_column: str,
                 cardinality: str):
        self.from_table = from_table
        self.from_column = from_column
        self.to_table = to_table
        self.to_column = to_column
        self.rel_type = 'FOREIGN_KEY'
        self.cardinality = cardinality

    def to_dict(self) -> Dict[str, str]:
        return {
            'fromTable': self.from_table,
            'fromColumn': self.from_column,
            'toTable': self.to_table,
            'toColumn': self.to_column,
            'type': self.rel_type,
            'cardinality': self.cardinality,
        }

    def __repr__(self):
        return (f"Relationship({self.from_table}.{self.from_column} -> "
                f"{self.to_table}.{self.to_column}, cardinality={self.cardinality})")


class ParseIssue:
    """An error or warning collected during parsing"""

    def __init__(self, issue_type: str, message: str, table_name: Optional[str] = None):
        self.type = issue_type
        self.message = message
        self.table_name = table_name

    def to_dict(self) -> Dict[str, str]:
        data = {'type': self.type, 'message': self.message}
        if self.table_name is not None:
            data['tableName'] = self.table_name
        return data

    def __repr__(self):
        return f"ParseIssue({self.type}: {self.message})"


class ParseStats:

    def __init__(self):
        self.total_tables = 0
        self.total_columns = 0
        self.total_relationships = 0
        self.total_indexes = 0
        self.parse_time = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            'totalTables': self.total_tables,
            'totalColumns': self.total_columns,
            'totalRelationships': self.total_relationships,
            'totalIndexes': self.total_indexes,
            'parseTime': self.parse_time,
        }


class Schema:
    """Top-level parse result. Errors and warnings are append-only."""

    def __init__(self):
        self.tables: Dict[str, Table] = {}
        self.indexes: Dict[str, Index] = {}
        self.relationships: List[Relationship] = []
        self.errors: List[ParseIssue] = []
        self.warnings: List[ParseIssue] = []
        self.stats = ParseStats()

    @property
    def success(self) -> bool:
        return not self.errors

    def add_error(self, issue_type: str, message: str, table_name: Optional[str] = None):
        self.errors.append(ParseIssue(issue_type, message, table_name))

    def add_warning(self, issue_type: str, message: str, table_name: Optional[str] = None):
        self.warnings.append(ParseIssue(issue_type, message, table_name))

    def calculate_stats(self):
        self.stats.total_tables = len(self.tables)
        self.stats.total_columns = sum(len(t.columns) for t in self.tables.values())
        self.stats.total_relationships = len(self.relationships)
        self.stats.total_indexes = len(self.indexes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'tables': {name: table.to_dict() for name, table in self.tables.items()},
            'relationships': [rel.to_dict() for rel in self.relationships],
            'indexes': {name: idx.to_dict() for name, idx in self.indexes.items()},
            'errors': [e.to_dict() for e in self.errors],
            'warnings': [w.to_dict() for w in self.warnings],
            'stats': self.stats.to_dict(),
        }

    def __repr__(self):
        return (f"Schema(tables={len(self.tables)}, relationships={len(self.relationships)}, "
                f"errors={len(self.errors)})")
