"""HTTP surface exposing the simulation stats.

``GET /network-stats`` returns the current snapshot. Cross-origin requests are
allowed from any origin and the companion UI is served from a static
directory.
"""

import logging
import os

from flask import Flask, abort, jsonify, send_from_directory
from flask_cors import CORS

from netload_sim.core.simulator import NetworkSimulator

logger = logging.getLogger(__name__)


def create_app(simulator: NetworkSimulator, static_dir: str = "public") -> Flask:
    """Create the Flask application.

    Args:
        simulator: The simulator whose state is exposed.
        static_dir: Directory holding the companion UI.

    Returns:
        The configured Flask app.
    """
    static_dir = os.path.abspath(static_dir)
    app = Flask(__name__, static_folder=static_dir, static_url_path="")
    CORS(app, resources={r"/*": {"origins": "*"}})

    @app.get("/network-stats")
    def network_stats():
        return jsonify(simulator.snapshot().to_dict())

    @app.get("/")
    def index():
        if not os.path.isfile(os.path.join(static_dir, "index.html")):
            abort(404)
        return send_from_directory(static_dir, "index.html")

    return app


def serve(app: Flask, host: str = "127.0.0.1", port: int = 3500) -> None:
    """Run the development server until the process is stopped."""
    logger.info("Server running at http://%s:%d", host, port)
    app.run(host=host, port=port, threaded=True, use_reloader=False)
