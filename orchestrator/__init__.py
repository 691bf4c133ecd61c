"""
Orchestration package for the Notion to Markdown sync loop.

The orchestrator sequences the per-page pipeline: fetch the block tree,
convert it to markdown, write the file, then throttle before the next page.
"""

from .sync_orchestrator import SyncOrchestrator

__all__ = [
    'SyncOrchestrator'
]
