"""
PlaneTracker Flask Application.

Main entry point for the web application. Initializes:
- Snapshot store
- Refresh scheduler (or the mock snapshot when USE_MOCK_DATA=1)
- API routes

Usage:
    python -m planetracker.app

Or with gunicorn:
    gunicorn 'planetracker.app:create_app()'
"""

import logging
import os
from typing import Optional

from flask import Flask
from flask_cors import CORS

from planetracker.config import config
from planetracker.api import flights_bp, status_bp
from planetracker.ingestion import OpenSkyClient, RefreshEvent, RefreshEventKind, RefreshScheduler
from planetracker.mock_data import load_mock_data
from planetracker.store import SnapshotStore

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
logger = logging.getLogger(__name__)


def _log_refresh_event(event: RefreshEvent) -> None:
    if event.kind == RefreshEventKind.ERROR:
        logger.warning(f'Serving stale snapshot: {event.error}')


def create_app(
    start_scheduler: bool = True,
    client: Optional[OpenSkyClient] = None,
    store: Optional[SnapshotStore] = None,
    use_mock_data: Optional[bool] = None,
) -> Flask:
    """
    Application factory for Flask.

    Args:
        start_scheduler: Whether to start background polling.
                         Set to False for testing.
        client: OpenSky client (created from config if None)
        store: Snapshot store (new empty store if None)
        use_mock_data: Serve the fixed mock snapshot instead of live data
                       (defaults to USE_MOCK_DATA)

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = config.secret_key

    # Enable CORS for API endpoints
    CORS(app, resources={r'/api/*': {'origins': '*'}})

    # Register API blueprints
    app.register_blueprint(flights_bp)
    app.register_blueprint(status_bp)

    client = client or OpenSkyClient.from_config()
    store = store or SnapshotStore()
    if use_mock_data is None:
        use_mock_data = config.use_mock_data

    app.config['OPENSKY_CLIENT'] = client
    app.config['SNAPSHOT_STORE'] = store
    app.config['MOCK_DATA'] = use_mock_data

    if use_mock_data:
        load_mock_data(store)
        app.config['REFRESH_SCHEDULER'] = None
        logger.info('Mock data mode: background refresh disabled')
    else:
        scheduler = RefreshScheduler(client=client, store=store)
        scheduler.subscribe(_log_refresh_event)
        app.config['REFRESH_SCHEDULER'] = scheduler

        if start_scheduler:
            scheduler.start()
            logger.info(f'Refresh started with interval {scheduler.interval}s')

    @app.route('/health')
    def health():
        """Simple health check endpoint."""
        return {'status': 'ok'}

    # -------------------------------------------------------------------------
    # Error handlers
    # -------------------------------------------------------------------------

    @app.errorhandler(404)
    def not_found(e):
        return {'error': 'Not found'}, 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return {'error': 'Method not allowed'}, 405

    @app.errorhandler(500)
    def server_error(e):
        logger.error(f'Server error: {e}')
        return {'error': 'Internal server error'}, 500

    return app


def run_development_server():
    """Run the development server."""
    app = create_app()

    port = int(os.environ.get('PORT', 5000))

    logger.info(f'Starting PlaneTracker on http://localhost:{port}')
    logger.info(f'Flights API: http://localhost:{port}/api/flights')

    try:
        app.run(
            host='0.0.0.0',
            port=port,
            debug=config.debug,
            use_reloader=False,  # Disable reloader to prevent duplicate refresh threads
        )
    finally:
        scheduler = app.config.get('REFRESH_SCHEDULER')
        if scheduler:
            scheduler.stop()


if __name__ == '__main__':
    run_development_server()
