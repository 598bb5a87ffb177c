"""Layered merge policy shared by every source kind.

- dict + dict: recursive merge, in place
- sequence + sequence (list or tuple): concatenation into a list, value-equal
  duplicates dropped (first occurrence kept)
- anything else: a falsy target takes the source value, a falsy source never
  erases a value that is already set, otherwise the source wins

Containers taken over from a source are copied, so the merged tree never
shares a dict or list with the files it was built from.
"""

from typing import Any, List, Optional

from deepmerge import Merger

from .domain import ConfigTree

SEQUENCE_TYPES = (list, tuple)


def _detach(value: Any) -> Any:
    # Tuples become lists so later layers and app dirs can extend them
    if isinstance(value, dict):
        return {k: _detach(v) for k, v in value.items()}
    if isinstance(value, SEQUENCE_TYPES):
        return [_detach(item) for item in value]
    return value


def _same_value(left: Any, right: Any) -> bool:
    # True == 1 in Python; keep booleans apart from numbers
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return left == right


def _merge_dict(config, path, base: dict, nxt: dict) -> dict:
    for key, value in nxt.items():
        if key in base:
            base[key] = config.value_strategy(path + [key], base[key], value)
        else:
            base[key] = _detach(value)
    return base


def _concat_unique(config, path, base, nxt) -> List[Any]:
    merged: List[Any] = []
    for item in list(base) + [_detach(item) for item in nxt]:
        if not any(_same_value(item, seen) for seen in merged):
            merged.append(item)
    return merged


def _keep_set_value(config, path, base: Any, nxt: Any) -> Any:
    if not base:
        return _detach(nxt)
    if not nxt:
        return base
    return _detach(nxt)


def _resolve_conflict(config, path, base: Any, nxt: Any) -> Any:
    if isinstance(base, SEQUENCE_TYPES) and isinstance(nxt, SEQUENCE_TYPES):
        return _concat_unique(config, path, base, nxt)
    return _keep_set_value(config, path, base, nxt)


config_merger = Merger(
    [
        (list, [_concat_unique]),
        (tuple, _concat_unique),
        (dict, [_merge_dict]),
    ],
    [_keep_set_value],
    [_resolve_conflict],
)


def merge_config(target: ConfigTree, source: Optional[ConfigTree]) -> ConfigTree:
    """Merge ``source`` into ``target`` and return ``target``.

    ``target`` is mutated, ``source`` is left untouched. A ``None`` source
    (a file that produced nothing) leaves ``target`` as it is.
    """
    if source is None:
        return target
    return config_merger.merge(target, source)
