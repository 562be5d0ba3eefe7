"""
Flask Backend API for the Incremental Heston Pricer

═══════════════════════════════════════════════════════════════════════════════
REST API ENDPOINTS FOR A LIVE MONTE CARLO RUN
═══════════════════════════════════════════════════════════════════════════════

Endpoints:
- GET  /api/health: Health check
- POST /api/initialize: Configure and reset the run
- POST /api/batch: Advance the run by a batch of simulations
- GET  /api/state: Current price estimate, reference price and phase
- GET  /api/percentile/<p>: Percentile path p ∈ {0, 25, 50, 75, 100}
- GET  /api/percentiles: All available percentile paths
- POST /api/paths: Preview a few simulated (S, V) paths

The front end drives the run: one initialize, then repeated batch calls,
polling state between batches. A single lock serialises every access to the
shared run so a reader never sees a half-updated batch.

═══════════════════════════════════════════════════════════════════════════════
"""

import logging
import threading

from flask import Flask, request, jsonify
from flask_cors import CORS

from heston_mc.backend.core import config
from heston_mc.backend.core.parameters import ModelParameters
from heston_mc.backend.core.random_source import LCGRandom
from heston_mc.backend.solvers.path_simulator import simulate_path_with_variance
from heston_mc.backend.solvers.simulation import SimulationRun

logger = logging.getLogger(__name__)


# Initialize Flask app
app = Flask(__name__)
CORS(app)


class SimulationSession:
    """The API's single run, guarded by one mutual-exclusion boundary."""

    def __init__(self):
        self.lock = threading.Lock()
        self.run = SimulationRun(
            tracking_limit=config.TRACKING_LIMIT,
            path_capacity=config.PATH_CAPACITY
        )
        self.initialized = False


session = SimulationSession()


# ═══════════════════════════════════════════════════════════════════════════════
# UTILITY FUNCTIONS
# ═══════════════════════════════════════════════════════════════════════════════

def get_json_data() -> dict:
    """Get JSON data from request with fallback to empty dict."""
    json_data = request.get_json(silent=True)
    return json_data if json_data is not None else {}


def parse_params(data: dict) -> ModelParameters:
    """
    Parse ModelParameters from request data.

    Expected format:
    {
        "params": {
            "S0": float, "v0": float, "r": float,
            "theta": float, "kappa": float, "xi": float, "rho": float,
            "T": float, "K": float, "N": int
        }
    }

    Missing fields take the default run configuration.
    """
    return ModelParameters.from_dict(data.get('params', {}))


def percentile_payload(percentile: int, path) -> dict:
    return {
        'percentile': percentile,
        'times': session.run.time_grid().tolist(),
        'path': path.tolist()
    }


# ═══════════════════════════════════════════════════════════════════════════════
# ROUTES
# ═══════════════════════════════════════════════════════════════════════════════

@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'healthy',
        'service': f'{config.PROJECT_NAME} API',
        'version': config.API_VERSION
    })


@app.route('/api/initialize', methods=['POST'])
def initialize_run():
    """
    Configure and reset the run.

    Request JSON:
    {
        "params": {S0, v0, r, theta, kappa, xi, rho, T, K, N},
        "seed": int (optional, wall clock when omitted)
    }

    Response JSON: run snapshot
    """
    try:
        data = get_json_data()
        params = parse_params(data)
        seed = data.get('seed')
        seed = int(seed) if seed is not None else None

        with session.lock:
            session.run.initialize(params, seed=seed)
            session.initialized = True
            result = session.run.snapshot()

        result['feller_ratio'] = params.feller_ratio if params.xi > 0 else None
        result['feller_satisfied'] = params.feller_satisfied
        return jsonify(result)

    except (ValueError, TypeError) as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.exception("initialize failed")
        return jsonify({'error': str(e)}), 500


@app.route('/api/batch', methods=['POST'])
def run_batch():
    """
    Advance the run.

    Request JSON:
    {
        "batch_size": int (optional, default from config)
    }

    Response JSON: run snapshot
    """
    try:
        data = get_json_data()
        batch_size = int(data.get('batch_size', config.DEFAULT_BATCH_SIZE))

        with session.lock:
            if not session.initialized:
                return jsonify({'error': 'Run not initialised; POST /api/initialize first'}), 400
            session.run.run_batch(batch_size)
            result = session.run.snapshot()

        return jsonify(result)

    except (ValueError, TypeError) as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.exception("batch failed")
        return jsonify({'error': str(e)}), 500


@app.route('/api/state', methods=['GET'])
def get_state():
    """Current snapshot of the run."""
    with session.lock:
        result = session.run.snapshot()
        result['initialized'] = session.initialized
    return jsonify(result)


@app.route('/api/percentile/<int:percentile>', methods=['GET'])
def get_percentile(percentile):
    """
    One percentile path.

    Response JSON:
    {
        "percentile": int,
        "times": [floats],
        "path": [floats]
    }
    or 404 while unavailable (tracking, empty cohort, unknown percentile).
    """
    with session.lock:
        path = session.run.get_percentile_path(percentile)
        if path is None:
            return jsonify({'error': f'Percentile path {percentile} not available'}), 404
        return jsonify(percentile_payload(percentile, path))


@app.route('/api/percentiles', methods=['GET'])
def get_percentiles():
    """
    All available percentile paths.

    Response JSON:
    {
        "tracking_phase": bool,
        "times": [floats],
        "paths": {"0": [floats], "25": [...], ...}
    }
    """
    with session.lock:
        paths = session.run.percentile_paths()
        return jsonify({
            'tracking_phase': session.run.is_tracking_phase,
            'times': session.run.time_grid().tolist(),
            'paths': {str(pct): path.tolist() for pct, path in paths.items()}
        })


@app.route('/api/paths', methods=['POST'])
def simulate_paths():
    """
    Simulate a handful of paths for visualization.

    Independent of the live run: uses its own generator.

    Request JSON:
    {
        "params": {S0, v0, r, theta, kappa, xi, rho, T, K, N},
        "n_paths": int (default: 10),
        "seed": int (optional)
    }

    Response JSON:
    {
        "times": [floats],
        "S_paths": [[floats]],  # [path][time]
        "V_paths": [[floats]]   # [path][time]
    }
    """
    try:
        data = get_json_data()
        params = parse_params(data)
        n_paths = min(int(data.get('n_paths', 10)), config.PREVIEW_PATHS_LIMIT)  # Limit for performance
        seed = data.get('seed')

        source = LCGRandom(int(seed) if seed is not None else None)
        S_paths, V_paths = [], []
        for _ in range(max(n_paths, 0)):
            S, V = simulate_path_with_variance(params, source)
            S_paths.append(S.tolist())
            V_paths.append(V.tolist())

        times = [i * params.dt for i in range(params.N + 1)]

        return jsonify({
            'times': times,
            'S_paths': S_paths,
            'V_paths': V_paths
        })

    except (ValueError, TypeError) as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.exception("path preview failed")
        return jsonify({'error': str(e)}), 500
