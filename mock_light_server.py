from flask import Flask, request, jsonify
import threading

from utils import LIGHT_PATH, DEFAULT_BRIGHTNESS, DEFAULT_TEMPERATURE

LIGHT_FIELDS = ("on", "brightness", "temperature")


def create_app():
    """Flask app that behaves like a single Key Light for local testing."""
    app = Flask(__name__)

    # Shared state
    state = {"on": 0, "brightness": DEFAULT_BRIGHTNESS, "temperature": DEFAULT_TEMPERATURE}
    stats = {"updates": 0}
    state_lock = threading.Lock()

    def light_response():
        return jsonify({"numberOfLights": 1, "lights": [dict(state)]})

    @app.route(LIGHT_PATH, methods=['GET'])
    def get_lights():
        """Current light state."""
        with state_lock:
            return light_response()

    @app.route(LIGHT_PATH, methods=['PUT'])
    def put_lights():
        """Apply the first light of an update request."""
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not data.get('lights'):
            return jsonify({'success': False, 'message': 'Expected a lights array'}), 400

        light = data['lights'][0]
        if not isinstance(light, dict):
            return jsonify({'success': False, 'message': 'Invalid light entry'}), 400

        try:
            changes = {k: int(light[k]) for k in LIGHT_FIELDS if k in light}
        except (TypeError, ValueError):
            return jsonify({'success': False, 'message': 'Light fields must be integers'}), 400

        with state_lock:
            state.update(changes)
            stats['updates'] += 1
            print(f"[SERVER] Update #{stats['updates']}: {state}")
            return light_response()

    @app.route('/stats')
    def get_stats():
        """Number of accepted updates, to make request flooding visible."""
        with state_lock:
            return jsonify(dict(stats))

    return app


if __name__ == '__main__':
    print("="*50)
    print("Mock Key Light")
    print("="*50)
    print(f"Listening at: http://localhost:9123{LIGHT_PATH}")
    print("Press Ctrl+C to stop")
    print("="*50)
    create_app().run(host='0.0.0.0', port=9123, debug=False, threaded=True)
