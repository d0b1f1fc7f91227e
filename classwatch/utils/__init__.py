"""
Utilities Package - Low-level helpers
- Status normalization
- State persistence
- Configuration loading
- Scheduler for watch mode
"""

from .config import CheckerConfig, load_config, validate_config
from .race import first_settled
from .scheduler import CheckScheduler
from .state_store import PersistedState, StateStore
from .status import AVAILABLE, FULL, UNKNOWN, WAITLIST, normalize_status

__all__ = [
    'CheckerConfig',
    'load_config',
    'validate_config',
    'first_settled',
    'CheckScheduler',
    'PersistedState',
    'StateStore',
    'AVAILABLE',
    'FULL',
    'UNKNOWN',
    'WAITLIST',
    'normalize_status'
]
