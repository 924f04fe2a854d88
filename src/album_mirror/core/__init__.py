"""Core functionality for the album mirror.

This module contains the reconciliation and enrichment pipeline:
- artwork: Cover and artist picture resolution through online providers
- sync: Staleness decisions and copying into the target library
- filesystem: Source tree layout detection
"""
