"""
Mirror — Push a normalized repository to object storage.

This package holds the sync orchestrator, the mirror tool interface and
its AzCopy implementation, and the local record of past syncs.
"""
