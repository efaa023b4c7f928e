from flask import Flask
from flask_cors import CORS
import logging

from core.config import SECRET_KEY, LOG_LEVEL, HOST, PORT
from routes.verses_api import verses_bp

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def create_app() -> Flask:
    app = Flask(__name__)
    app.config["SECRET_KEY"] = SECRET_KEY

    CORS(app)

    # Register blueprints
    app.register_blueprint(verses_bp)
    return app


app = create_app()

if __name__ == "__main__":
    app.run(host=HOST, port=PORT)
