"""
freeslotfinder - find common free meeting slots in calendar API events.
"""

__version__ = "0.1.0"
