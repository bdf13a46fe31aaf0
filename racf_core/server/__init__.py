# =============================================================================
# racf_core/server/__init__.py
# Remote user service used by the console when online
# =============================================================================

from .app import create_app

__all__ = ["create_app"]
