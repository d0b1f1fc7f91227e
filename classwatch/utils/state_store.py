"""
State Store - Last observed status persisted as a small JSON file
Read permissively, written as a full replace
"""

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from ..errors import PersistenceError
from .status import UNKNOWN

logger = logging.getLogger(__name__)


@dataclass
class PersistedState:
    """Outcome of the last successful cycle"""
    last_status: str = UNKNOWN
    last_checked_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        data = {'lastStatus': self.last_status}
        if self.last_checked_at is not None:
            data['lastCheckedAt'] = self.last_checked_at.isoformat()
        return data


class StateStore:
    """Single-record JSON state file"""

    def __init__(self, path: Union[str, Path] = 'state.json'):
        self.path = Path(path).resolve()

    def read(self) -> PersistedState:
        """
        Load the persisted state

        Never raises: a missing, unreadable or malformed file yields the
        default state, losing history only costs one on-change decision.

        Returns:
            PersistedState
        """
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.info(f"No state file at {self.path}, starting fresh")
            return PersistedState()
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable state file {self.path}: {e}")
            return PersistedState()

        if not isinstance(data, dict) or not isinstance(data.get('lastStatus'), str):
            logger.warning(f"Ignoring malformed state file {self.path}")
            return PersistedState()

        checked_at = None
        raw_checked_at = data.get('lastCheckedAt')
        if isinstance(raw_checked_at, str):
            try:
                checked_at = datetime.fromisoformat(raw_checked_at.replace('Z', '+00:00'))
            except ValueError:
                logger.warning(f"Bad lastCheckedAt in state file: {raw_checked_at!r}")

        return PersistedState(last_status=data['lastStatus'], last_checked_at=checked_at)

    def write(self, state: PersistedState):
        """
        Replace the state file with the given state

        Args:
            state: State to persist

        Raises:
            PersistenceError: If the file can't be written
        """
        tmp_path = self.path.with_name(self.path.name + '.tmp')
        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(state.to_dict(), f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise PersistenceError(f"Could not write state file {self.path}: {e}") from e

        logger.debug(f"State saved: {state.last_status}")
