"""
PlaneTracker Package.

Live aircraft tracking service built on the OpenSky Network feed and Flask.

Modules:
    api/         REST endpoints for flight queries, refresh and status
    models/      Immutable value types (FlightRecord, Snapshot, BoundingBox)
    ingestion/   OpenSky client, state vector parser and refresh scheduler
    filters.py   Filter criteria and predicate engine
    store.py     Thread-safe snapshot store with atomic replacement
    mock_data.py Fixed mock flights for tests and offline use
    config.py    Centralized configuration from environment variables
    errors.py    Exception hierarchy
"""

__version__ = '1.0.0'
