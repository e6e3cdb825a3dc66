"""Validation, serialization and parameter helpers."""

from whisk_client.utils.parameters import merge_parameters, to_parameter_list
from whisk_client.utils.serializers import QualifiedName, resolve_qualified_name

__all__ = [
    'merge_parameters',
    'to_parameter_list',
    'QualifiedName',
    'resolve_qualified_name',
]
