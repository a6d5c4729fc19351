"""
teamavailability - Find common free time across part-time instructors.
"""

__version__ = "0.1.0"
