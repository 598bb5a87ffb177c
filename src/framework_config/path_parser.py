"""Config paths: ``"system.dirs.models[0]"`` or ``["system", "dirs", "models", 0]``."""

import re
from typing import Any, List, Sequence, Union

ConfigPath = Union[str, Sequence[Any]]

# Dots and stray brackets between tokens are skipped
_SEGMENT = re.compile(
    r"""
    \[(?P<index>\d+)\]                          # [0]
    | \[(?P<quote>['"])(?P<key>.*?)(?P=quote)\]  # ['key.with.dots']
    | (?P<name>[^.\[\]]+)                       # plain key
    """,
    re.VERBOSE,
)


def parse_path(path: str) -> List[Union[str, int]]:
    """Split a dotted path; ``[n]`` becomes the int ``n``, quoted brackets keep dots."""
    segments: List[Union[str, int]] = []
    for match in _SEGMENT.finditer(path):
        if match.group("index") is not None:
            segments.append(int(match.group("index")))
        elif match.group("quote") is not None:
            segments.append(match.group("key"))
        else:
            segments.append(match.group("name"))
    return segments


def to_segments(path: ConfigPath) -> List[Any]:
    if isinstance(path, str):
        return parse_path(path)
    return list(path)
