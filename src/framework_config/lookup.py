from typing import Any, Mapping, Sequence
from .path_parser import ConfigPath, to_segments

_MISSING = object()

def _step(current: Any, segment: Any) -> Any:
    if isinstance(current, Mapping):
        value = current.get(segment, _MISSING)
        # "[0]" on a mapping still finds a "0" key (JSON keys are always strings)
        if value is _MISSING and isinstance(segment, int):
            value = current.get(str(segment), _MISSING)
        return value

    if isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
        if isinstance(segment, int) and not isinstance(segment, bool) and 0 <= segment < len(current):
            return current[segment]
        return _MISSING

    # Section objects (e.g. Configurable instances) expose public attributes only
    if isinstance(segment, str) and not segment.startswith('_') and hasattr(current, segment):
        return getattr(current, segment)

    return _MISSING

def get_path(tree: Any, path: ConfigPath, default: Any = None) -> Any:
    """
    Resolve a value from the config tree.
    Returns ``default`` when any segment is missing. A stored ``None`` is returned as is.
    """
    segments = to_segments(path)
    if not segments:
        return default

    current = tree
    for segment in segments:
        if current is None:
            return default
        current = _step(current, segment)
        if current is _MISSING:
            return default

    return current
