"""
Status API endpoints.

Provides endpoints for:
- GET /api/status - Snapshot freshness, refresh state and configuration
"""

import logging
import time
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

from planetracker.config import config

logger = logging.getLogger(__name__)

status_bp = Blueprint('status', __name__, url_prefix='/api/status')


@status_bp.route('', methods=['GET'])
def get_system_status():
    """
    Get system health and status information.

    Returns:
    - Snapshot store status (loading flag, current error, last update)
    - Refresh scheduler statistics
    - Configuration info

    Status is 'degraded' while the last refresh failed and stale data is
    being served.
    """
    start_time = time.perf_counter()

    store = current_app.config['SNAPSHOT_STORE']
    scheduler = current_app.config.get('REFRESH_SCHEDULER')

    store_status = store.status
    scheduler_stats = scheduler.stats if scheduler else {'running': False}

    if current_app.config.get('MOCK_DATA'):
        mode = 'mock'
    elif scheduler is not None:
        mode = 'live'
    else:
        mode = 'idle'

    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'status': 'degraded' if store_status.is_stale else 'healthy',
        'mode': mode,
        'snapshot': store_status.to_dict(),
        'store': store.stats,
        'refresh': scheduler_stats,
        'config': {
            'refresh_interval': config.refresh.interval_seconds,
            'request_timeout': config.opensky.timeout_seconds,
            'opensky_base_url': config.opensky.base_url,
        },
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'query_time_ms': round(query_time_ms, 2),
    })
