"""
Class Watch - Class availability checker
Detects whether a scheduled class session is available or full
and sends a notification according to the configured alert mode
"""

__version__ = "0.1.0"
