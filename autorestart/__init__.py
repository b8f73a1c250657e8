"""
AutoRestart - daily game server restarts with staged player notices.
"""

__version__ = "1.0.0"
