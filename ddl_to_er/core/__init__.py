"""
DDL to ER compiler: SQL text -> Schema -> diagram projection
"""
from .sql_parser import parse_sql
from .schema_model import Schema, Table, Column, Index, Relationship
from .er_model import Entity, Attribute, DiagramProjection, build_er_model
from .visualization import render_er_diagram, render_mermaid, ERDiagramRenderer

__all__ = [
    'parse_sql',
    'Schema',
    'Table',
    'Column',
    'Index',
    'Relationship',
    'Entity',
    'Attribute',
    'DiagramProjection',
    'build_er_model',
    'render_er_diagram',
    'render_mermaid',
    'ERDiagramRenderer'
]
