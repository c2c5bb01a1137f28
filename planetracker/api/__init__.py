"""
API module for PlaneTracker.

Provides REST endpoints for:
- Flight data (filtered snapshot views, single flights, regional queries)
- Manual refresh
- System status
"""

from planetracker.api.flights import flights_bp
from planetracker.api.status import status_bp

__all__ = ['flights_bp', 'status_bp']
