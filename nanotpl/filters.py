"""
Встроенные фильтры.

Ядро вычисления видит только ту таблицу фильтров, которую передал вызывающий код;
DEFAULT_FILTERS: готовый набор для CLI и для тех, кому он подходит.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping

from .expressions.values import UNDEFINED, is_iterable_sequence, to_output, type_name


def _first(value: Any) -> Any:
    if isinstance(value, str) or is_iterable_sequence(value):
        return value[0] if len(value) else UNDEFINED
    return UNDEFINED


def _last(value: Any) -> Any:
    if isinstance(value, str) or is_iterable_sequence(value):
        return value[-1] if len(value) else UNDEFINED
    return UNDEFINED


def _length(value: Any) -> Any:
    if isinstance(value, (str, Mapping)) or is_iterable_sequence(value):
        return len(value)
    return UNDEFINED


def _keys(value: Any) -> List[Any]:
    if isinstance(value, Mapping):
        return list(value.keys())
    if is_iterable_sequence(value):
        return [str(index) for index in range(len(value))]
    raise TypeError(f"cannot take keys of {type_name(value)}")


def _values(value: Any) -> List[Any]:
    if isinstance(value, Mapping):
        return list(value.values())
    if is_iterable_sequence(value):
        return list(value)
    raise TypeError(f"cannot take values of {type_name(value)}")


def _reverse(value: Any) -> Any:
    if isinstance(value, str):
        return value[::-1]
    if is_iterable_sequence(value):
        return list(reversed(value))
    raise TypeError(f"cannot reverse {type_name(value)}")


def _unique(value: Any) -> List[Any]:
    if not is_iterable_sequence(value):
        raise TypeError(f"cannot take unique items of {type_name(value)}")
    seen = set()
    result: List[Any] = []
    for item in value:
        key = _unique_key(item)
        if key not in seen:
            seen.add(key)
            result.append(item)
    return result


def _unique_key(item: Any) -> Any:
    """Ключ, одинаковый у элементов, равных по strict_equals."""
    if isinstance(item, bool):
        return ("boolean", item)
    if isinstance(item, (int, float)):
        return ("number", item)
    if isinstance(item, (list, tuple, dict)):
        return ("object", id(item))
    try:
        hash(item)
    except TypeError:
        return ("object", id(item))
    return (type(item), item)


DEFAULT_FILTERS: Dict[str, Callable[[Any], Any]] = {
    "upper": lambda value: to_output(value).upper(),
    "lower": lambda value: to_output(value).lower(),
    "trim": lambda value: to_output(value).strip(),
    "first": _first,
    "last": _last,
    "length": _length,
    "keys": _keys,
    "values": _values,
    "reverse": _reverse,
    "unique": _unique,
    "type": type_name,
}


__all__ = ["DEFAULT_FILTERS"]
