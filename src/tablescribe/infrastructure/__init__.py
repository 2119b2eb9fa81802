"""
Infrastructure Layer

Reusable services that the table builder composes:

Components:
- sql: identifier quoting, parameter binding, dialect and statement builders
- schema: metadata reflection, relationship resolution, schema-change sets

Usage:
    from tablescribe.infrastructure.sql import MySQLDialect, InsertBuilder
    from tablescribe.infrastructure.schema import SchemaReflector
"""

__all__: list[str] = []
