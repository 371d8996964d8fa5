"""
CrispAlign v0.1.0

Configuration schema for CrispAlign.

Defines all available configuration parameters with defaults and validation.

Author: CrispAlign Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import copy
from typing import Dict, Any, Optional, List, Union
from pathlib import Path
import yaml


# Default configuration values
DEFAULT_CONFIG = {
    # ========================================================================
    # Alignment
    # ========================================================================
    'alignment': {
        'numcols': 6,  # Group columns per output row
        'chain_start': 'last',  # 'last': visually last group is the oldest
    },

    # ========================================================================
    # Sample Filters (CR_<locus>_MOI<ratio>_tp_<timepoint>)
    # ========================================================================
    'filters': {
        'locus': None,
        'ratio': None,
        'timepoint': None,
    },

    # ========================================================================
    # Output
    # ========================================================================
    'output': {
        'format': 'console',  # 'console', 'csv' or 'xlsx'
        'outfile': None,  # Default: <input>.aligned.<format> next to the input
        'colwidth': 15,  # Console column width
        'colors': None,  # JSON colormap to read (or create)
        'sort': None,  # 'group' sorts rows by chain then abundance
        'logging': {
            'level': 'INFO',
            'log_file': None,
        },
    },

    # ========================================================================
    # Hardware
    # ========================================================================
    'hardware': {
        'threads': 1,  # Worker processes for frequency counting
    },
}

VALID_FORMATS = ['console', 'csv', 'xlsx']
VALID_FILTERS = ['locus', 'ratio', 'timepoint']
VALID_CHAIN_STARTS = ['first', 'last']
VALID_SORTS = [None, 'group', 'groups']
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
TEMPLATES = ['default', 'csv', 'chain-first']


def default_config() -> Dict[str, Any]:
    """Fresh, independent copy of DEFAULT_CONFIG."""
    return copy.deepcopy(DEFAULT_CONFIG)


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load configuration from file or return defaults.

    Args:
        config_path: Path to YAML config file (None = use defaults)

    Returns:
        Configuration dictionary
    """
    from .parser import ConfigParser
    return ConfigParser(config_path).to_dict()


def save_config_template(output_path: Path, template: str = 'default'):
    """
    Save a configuration template to file.

    Args:
        output_path: Output file path
        template: Template type ('default', 'csv', 'chain-first')
    """
    if template not in TEMPLATES:
        raise ValueError(f"Unknown template: {template}")

    config = default_config()

    if template == 'csv':
        config['output']['format'] = 'csv'
        config['output']['sort'] = 'group'

    elif template == 'chain-first':
        config['alignment']['chain_start'] = 'first'

    with open(output_path, 'w') as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration dictionary.

    Args:
        config: Configuration to validate

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    alignment = config.get('alignment', {})
    if not _is_positive_int(alignment.get('numcols')):
        errors.append(f"Invalid numcols: {alignment.get('numcols')!r} (must be a positive integer)")
    if alignment.get('chain_start') not in VALID_CHAIN_STARTS:
        errors.append(f"Invalid chain_start: {alignment.get('chain_start')!r} "
                      f"(choose from {', '.join(VALID_CHAIN_STARTS)})")

    filters = config.get('filters') or {}
    if not isinstance(filters, dict):
        errors.append(f"Invalid filters: {filters!r} (must be a mapping)")
        filters = {}
    for name, value in filters.items():
        if name not in VALID_FILTERS:
            errors.append(f"Unknown filter: {name!r} (choose from {', '.join(VALID_FILTERS)})")
        elif value is not None and (not isinstance(value, int) or isinstance(value, bool)):
            errors.append(f"Invalid {name} filter: {value!r} (must be an integer)")

    output = config.get('output', {})
    if output.get('format') not in VALID_FORMATS:
        errors.append(f"Invalid output format: {output.get('format')!r}")
    if not _is_positive_int(output.get('colwidth')):
        errors.append(f"Invalid colwidth: {output.get('colwidth')!r}")
    if output.get('sort') not in VALID_SORTS:
        errors.append(f"Invalid sort: {output.get('sort')!r} (only 'group' is supported)")
    level = output.get('logging', {}).get('level', 'INFO')
    if str(level).upper() not in VALID_LOG_LEVELS:
        errors.append(f"Invalid logging level: {level!r}")

    threads = config.get('hardware', {}).get('threads', 1)
    if not _is_positive_int(threads):
        errors.append(f"Invalid threads: {threads!r}")

    return errors
