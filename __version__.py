# ============================================================================
# VERSION - DEPENDENCY HEALER
# ============================================================================
# EPOCH: 1 - SELF-HEALING
# ============================================================================
"""
Version information for the dependency healer service.

This is the single source of truth for the application version.
Updated manually for each release.
"""
# Version format: major.minor.patch
__version__ = "3.0.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Build metadata
BUILD_DATE = "2026-10-17"

EPOCH = 1
CODENAME = "Dependency Healer"
