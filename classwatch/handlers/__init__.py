"""
Handlers Package - Business logic layer
- Alert policy
- Notification delivery
- Check cycle orchestration
"""

from .alert_policy import AlertMode, should_alert
from .notifier import DryRunNotifier, PushoverNotifier, TelegramNotifier, build_notifier
from .check_runner import CheckRunner, CycleResult, format_message

__all__ = [
    'AlertMode',
    'should_alert',
    'DryRunNotifier',
    'PushoverNotifier',
    'TelegramNotifier',
    'build_notifier',
    'CheckRunner',
    'CycleResult',
    'format_message'
]
