"""
Devonboard Sync

Keeps onboarding plans in step with the documentation they were generated from.
"""

__version__ = "0.1.0"
