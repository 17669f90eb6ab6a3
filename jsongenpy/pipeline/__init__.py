"""Parse result carriers."""

from jsongenpy.pipeline.result import SchemaParseResult

__all__ = ["SchemaParseResult"]
