"""
Configuration and parameter helpers.
"""
from .config_loader import (
    FireConfig,
    check_required_fields,
    load_fire_config,
    parse_mode,
    resolve_endpoints,
)
from .params import check_required_params

__all__ = [
    'FireConfig',
    'check_required_fields',
    'load_fire_config',
    'parse_mode',
    'resolve_endpoints',
    'check_required_params',
]
