import logging

from flask import Flask
from flask_cors import CORS
from dotenv import load_dotenv

from core.config import Settings
from routes.devotional_api import EXTENSION_KEY, devotional_bp
from services.devotional_service import DevotionalService

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def create_app(settings: Settings = None, service: DevotionalService = None) -> Flask:
    """Build the app with an explicitly constructed DevotionalService."""
    app = Flask(__name__)

    CORS(app)

    app.extensions[EXTENSION_KEY] = service or DevotionalService(settings or Settings())

    # Register blueprints
    app.register_blueprint(devotional_bp)

    return app


if __name__ == "__main__":
    create_app().run(host="127.0.0.1", port=5055)
