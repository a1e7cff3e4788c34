"""
ER Model Classes - Display-oriented projection of a parsed Schema (entities, attributes, relationships)
"""
import re
from typing import List, Dict, Any

from .schema_model import Schema, Column

WORD_PATTERN = re.compile(r'[A-Z]+(?![a-z])|[A-Z]?[a-z]+|\d+')


class Attribute:
    """Represents an attribute (column) of an entity."""

    def __init__(self, name: str, data_type: str, key: str = '', nullable: bool = True):
        self.name = name
        self.data_type = data_type
        self.key = key  # 'PK', 'FK', 'UQ' or ''
        self.nullable = nullable

    @property
    def is_pk(self) -> bool:
        return self.key == 'PK'

    @property
    def is_fk(self) -> bool:
        return self.key == 'FK'

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.data_type,
            "key": self.key,
            "nullable": self.nullable,
        }

    def __repr__(self):
        key_str = f" [{self.key}]" if self.key else ""
        return f"Attribute(name={self.name}{key_str}, type={self.data_type})"


class Entity:
    """Represents an entity (table) in the ER diagram"""

    def __init__(self, name: str, display_name: str = None):
        self.name = name
        self.display_name = display_name or name
        self.attributes: List[Attribute] = []

    def add_attribute(self, attribute: Attribute):
        """Add an attribute to this entity"""
        self.attributes.append(attribute)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "displayName": self.display_name,
            "columns": [attr.to_dict() for attr in self.attributes],
        }

    def __repr__(self):
        return f"Entity(name={self.name}, attributes={len(self.attributes)})"


class Relationship:
    """Represents a relationship between entities"""

    def __init__(self, from_entity: str, to_entity: str, rel_type: str, label: str):
        self.from_entity = from_entity
        self.to_entity = to_entity
        self.rel_type = rel_type  # ONE_TO_ONE, MANY_TO_ONE, MANY_TO_MANY
        self.label = label

    def to_dict(self) -> Dict[str, str]:
        return {
            "from": self.from_entity,
            "to": self.to_entity,
            "type": self.rel_type,
            "label": self.label,
        }

    def __repr__(self):
        return f"Relationship({self.from_entity} -> {self.to_entity}, type={self.rel_type})"


class DiagramProjection:
    """Entities and relationships ready for rendering"""

    def __init__(self, entities: List[Entity], relationships: List[Relationship]):
        self.entities = entities
        self.relationships = relationships

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entities": [entity.to_dict() for entity in self.entities],
            "relationships": [rel.to_dict() for rel in self.relationships],
            "metadata": {
                "totalEntities": len(self.entities),
                "totalRelationships": len(self.relationships),
            },
        }


def generate_display_name(name: str) -> str:
    """
    Turn snake_case / camelCase / PascalCase into Title Case words

    order_items -> Order Items, UserID -> User Id
    """
    words = WORD_PATTERN.findall(name)
    return ' '.join(word[0].upper() + word[1:].lower() for word in words)


def column_sort_order(column: Column) -> int:
    if column.is_primary_key:
        return 1
    if column.is_foreign_key:
        return 2
    if column.is_unique:
        return 3
    if column.is_identity:
        return 4
    if not column.is_nullable:
        return 5
    return 6


def column_key_type(column: Column) -> str:
    if column.is_primary_key:
        return 'PK'
    if column.is_foreign_key:
        return 'FK'
    if column.is_unique:
        return 'UQ'
    return ''


def build_er_model(schema: Schema) -> DiagramProjection:
    """
    Build the diagram projection from a parsed Schema

    Args:
        schema: Result of parse_sql

    Returns:
        DiagramProjection, rebuilt from scratch on every call
    """
    entities = []
    relationships = []

    for table_name, table in schema.tables.items():
        entity = Entity(table_name, generate_display_name(table_name))

        # sorted() 是稳定排序，同优先级保持声明顺序
        for column in sorted(table.columns.values(), key=column_sort_order):
            entity.add_attribute(Attribute(
                name=column.name,
                data_type=column.data_type.display(),
                key=column_key_type(column),
                nullable=column.is_nullable
            ))

        entities.append(entity)

    for rel in schema.relationships:
        relationships.append(Relationship(
            from_entity=rel.from_table,
            to_entity=rel.to_table,
            rel_type=rel.cardinality,
            label=f"{rel.from_column} → {rel.to_column}"
        ))

    return DiagramProjection(entities, relationships)
