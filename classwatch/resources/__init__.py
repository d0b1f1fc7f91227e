"""
Resources Package - Website interaction layer
- Browser session and login
- Element lookup across page, frames and popups
- Class status extraction
"""

from .frame_locator import locate
from .session_manager import SessionManager
from .status_extractor import StatusExtractor, StatusRecord, build_summary

__all__ = ['locate', 'SessionManager', 'StatusExtractor', 'StatusRecord', 'build_summary']
