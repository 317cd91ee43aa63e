"""
Column types, descriptors, DDL building, and schema introspection.
"""

from .builder import SchemaBuilder
from .column import Column
from .introspector import SchemaIntrospector
from .types import DataType, normalize_type

__all__ = ["Column", "DataType", "SchemaBuilder", "SchemaIntrospector", "normalize_type"]
