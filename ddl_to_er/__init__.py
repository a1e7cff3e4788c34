"""
SQL DDL to ER Diagram Converter Package
"""
from .core import parse_sql, build_er_model

__version__ = '1.0.0'

__all__ = ['parse_sql', 'build_er_model', '__version__']
