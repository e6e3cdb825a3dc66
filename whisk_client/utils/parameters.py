"""Parameter and annotation list handling.

OpenWhisk format: [{"key": "k1", "value": "v1"}, ...]
Internal format: {"k1": "v1", ...}
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from whisk_client.errors import ValidationError

KeyValues = Union[Mapping[str, Any], Iterable[Mapping[str, Any]], None]


def normalize_params_annotations(items: KeyValues) -> Dict[str, Any]:
    """
    Convert a parameter set to an insertion-ordered dictionary.

    Accepts either a mapping or an OpenWhisk ``[{key, value}]`` list.
    Later duplicates in a list override earlier ones.
    """
    if not items:
        return {}
    if isinstance(items, Mapping):
        result = dict(items)
    else:
        result = {}
        for item in items:
            if not isinstance(item, Mapping) or 'key' not in item:
                raise ValidationError(
                    f'Parameter entries must be {{"key", "value"}} objects, got {item!r}',
                    field='parameters',
                )
            result[item['key']] = item.get('value')

    for key in result:
        if not isinstance(key, str) or not key:
            raise ValidationError(
                f'Parameter keys must be non-empty strings, got {key!r}',
                field='parameters',
            )
    return result


def denormalize_params_annotations(data: Optional[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """
    Convert internal dictionary format to OpenWhisk parameter/annotation format.
    """
    if not data:
        return []
    return [{'key': k, 'value': v} for k, v in data.items()]


def to_parameter_list(items: KeyValues) -> List[Dict[str, Any]]:
    """Normalize any accepted parameter set into a duplicate-free ordered list."""
    return denormalize_params_annotations(normalize_params_annotations(items))


def merge_parameters(existing: KeyValues, new: KeyValues) -> List[Dict[str, Any]]:
    """
    Merge a new parameter set over an existing one.

    Keys in ``new`` overwrite keys of the same name in ``existing`` in place;
    keys only in ``existing`` are preserved; keys only in ``new`` are
    appended in the order given. A ``None`` value is kept as a value and
    does not remove the key.

    Args:
        existing: Current parameters (mapping or ``[{key, value}]`` list).
        new: Parameters to apply.

    Returns:
        Merged parameters in OpenWhisk list form.
    """
    merged = normalize_params_annotations(existing)
    for key, value in normalize_params_annotations(new).items():
        merged[key] = value
    return denormalize_params_annotations(merged)
