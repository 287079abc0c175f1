"""
Update Mirror — Normalize a vendor update repository and mirror it to
cloud object storage.
"""

__version__ = "0.1.0"
