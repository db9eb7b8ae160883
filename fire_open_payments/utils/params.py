"""
Presence checks for caller-supplied parameters.
"""
from typing import Any, Iterable, List, Mapping, Tuple


def is_missing(value: Any) -> bool:
    """None and blank strings count as missing; zero and False do not."""
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def check_required_params(required_params: Iterable[str], params: Mapping[str, Any]) -> Tuple[bool, List[str]]:
    """
    Check that every required parameter is present.

    Returns:
        ``(all_ok, missing_params)`` where ``missing_params`` keeps the order of
        ``required_params``.
    """
    missing_params = [name for name in required_params if is_missing(params.get(name))]
    return not missing_params, missing_params
