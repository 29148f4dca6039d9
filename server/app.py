from flask import Flask, request, jsonify, g
from flask_cors import CORS
import logging
import json
from time import perf_counter
from typing import List, Optional

from .config import Config
from .exceptions import MapsServiceError
from .maps_service import GoogleMapsService
from .route_optimizer import RouteOptimizer
from .tasks import get_locations


config = Config()

# Configure logging
_handlers: List[logging.Handler] = [logging.StreamHandler()]
if config.log_file:
    _handlers.append(logging.FileHandler(config.log_file))
logging.basicConfig(
    level=getattr(logging, config.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=_handlers
)
logger = logging.getLogger(__name__)


def _build_maps_service(config: Config) -> Optional[GoogleMapsService]:
    logger.info(f"API Key found: {'Yes' if config.has_api_key else 'No'}")
    if not config.has_api_key:
        logger.warning("GOOGLE_MAPS_API_KEY not found or not configured in environment variables")
        return None
    try:
        logger.info("Initializing Google Maps service...")
        service = GoogleMapsService(config.google_maps_api_key, travel_mode=config.travel_mode)
        logger.info("Google Maps service initialized successfully")
        return service
    except ValueError as e:
        logger.error(f"Error initializing Google Maps service: {e}")
        return None


def _collect_waypoints(data: dict, location_prefix: str) -> List[str]:
    """Explicit waypoints followed by any locations named in task notes"""
    waypoints = [str(w) for w in data.get('waypoints') or [] if str(w).strip()]
    tasks = data.get('tasks') or []
    notes = [task.get('notes') for task in tasks if isinstance(task, dict)]
    for location in get_locations(notes, prefix=location_prefix):
        if location not in waypoints:
            waypoints.append(location)
    return waypoints


def create_app(config: Config = config, maps_service=None) -> Flask:
    """Build the API; ``maps_service`` defaults to the Google Maps backed service"""
    app = Flask(__name__)
    CORS(app)  # Enable CORS for all routes

    if maps_service is None:
        maps_service = _build_maps_service(config)
    route_optimizer = (
        RouteOptimizer(maps_service, max_concurrent_requests=config.max_concurrent_requests)
        if maps_service else None
    )

    # Per-request timing: record start time and log duration on completion
    @app.before_request
    def _start_timer():
        g._start_time = perf_counter()

    @app.after_request
    def _log_request_duration(response):
        start = getattr(g, '_start_time', None)
        if start is not None:
            duration_ms = (perf_counter() - start) * 1000.0
            # Include response time header for easy debugging/measurement
            response.headers['X-Process-Time-ms'] = f"{duration_ms:.1f}"
            logger.info(
                "request completed: method=%s path=%s status=%s duration_ms=%.1f remote_addr=%s",
                request.method,
                request.full_path if request.query_string else request.path,
                response.status_code,
                duration_ms,
                request.remote_addr,
            )
        return response

    @app.teardown_request
    def _teardown_request_log(error=None):
        # If an unhandled exception occurred, ensure we still log duration
        if error is not None:
            start = getattr(g, '_start_time', None)
            duration_ms = (perf_counter() - start) * 1000.0 if start is not None else None
            logger.error(
                "request error: method=%s path=%s duration_ms=%s error=%s",
                request.method,
                request.full_path if request.query_string else request.path,
                f"{duration_ms:.1f}" if duration_ms is not None else 'unknown',
                repr(error),
            )

    @app.route('/', methods=['GET'])
    def health_check():
        """Health check endpoint"""
        return jsonify({
            'message': 'Errand route planner API is running!',
            'endpoints': {
                'go': '/api/go',
                'health': '/'
            },
            'status': 'healthy'
        })

    @app.route('/api/go', methods=['GET', 'POST'])
    def go():
        """
        Plan the fastest route from origin to destination through all waypoints.
        GET:  /api/go?origin=...&destination=...&waypoint=...&waypoint=...
        POST: {"origin": "...", "destination": "...",
               "waypoints": ["..."], "tasks": [{"notes": "... [Location: ...] ..."}]}
        """
        logger.info("=== GO REQUEST ===")

        if not route_optimizer:
            logger.error("Google Maps API key not configured - cannot plan route")
            return jsonify({'error': 'Google Maps API key not configured'}), 500

        if request.method == 'POST':
            data = request.get_json(silent=True)
            if not isinstance(data, dict):
                logger.error("No JSON data provided in request")
                return jsonify({'error': 'JSON data is required'}), 400
        else:
            data = {
                'origin': request.args.get('origin'),
                'destination': request.args.get('destination'),
                'waypoints': request.args.getlist('waypoint'),
            }
        logger.info(f"Request data received: {json.dumps(data)}")

        origin = data.get('origin')
        destination = data.get('destination')
        if not origin or not destination:
            logger.error("Missing origin or destination")
            return jsonify({'error': 'Both origin and destination are required'}), 400

        if isinstance(data.get('waypoints'), str):
            data['waypoints'] = [data['waypoints']]
        if not isinstance(data.get('waypoints') or [], list):
            logger.error("Waypoints must be a list, got %s", type(data['waypoints']).__name__)
            return jsonify({'error': 'waypoints must be a list'}), 400

        waypoints = _collect_waypoints(data, config.location_prefix)
        logger.info(f"Planning route from '{origin}' to '{destination}' through {len(waypoints)} waypoints")

        try:
            _algo_start = perf_counter()
            plan = route_optimizer.plan_route(origin, destination, waypoints)
            _compute_ms = (perf_counter() - _algo_start) * 1000.0
            logger.info("Time to plan route = %.1f ms (%d combinations)",
                        _compute_ms, plan['combinations_evaluated'])
        except MapsServiceError as e:
            logger.error(f"Google Maps failure while planning route: {e}", exc_info=True)
            return jsonify({'error': 'Internal server error'}), 500
        except Exception as e:
            logger.error(f"Exception in go: {str(e)}", exc_info=True)
            return jsonify({'error': 'Internal server error'}), 500

        logger.info("=== END GO REQUEST ===")
        response = jsonify({'success': True, 'data': plan})
        response.headers['X-Compute-Time-ms'] = f"{_compute_ms:.1f}"
        return response

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'Endpoint not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        return jsonify({'error': 'Internal server error'}), 500

    return app


app = create_app()


if __name__ == '__main__':
    if not config.has_api_key:
        print("\n" + "="*50)
        print("SETUP REQUIRED:")
        print("="*50)
        print("1. Get a Google Maps API key from: https://console.cloud.google.com/")
        print("2. Enable the following APIs:")
        print("   - Geocoding API")
        print("   - Directions API")
        print("   - Places API")
        print("3. Set GOOGLE_MAPS_API_KEY in the .env file")
        print("4. Restart the app")
        print("="*50)
        print("API will start but route planning is disabled without a valid key\n")

    app.run(host='0.0.0.0', port=5000, debug=True)
