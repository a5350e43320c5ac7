from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
import os
from foster_app.utils.logger import get_logger

# Initialize extensions
db = SQLAlchemy()
login_manager = LoginManager()


def _env_flag(name, default):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes', 'on')


def create_app(test_config=None):
    from pathlib import Path

    app = Flask(__name__)

    logger = get_logger("foster_app")
    logger.info("Initializing Flask application")

    test_config = test_config or {}

    # SECURITY: Require SECRET_KEY in environment unless running tests
    app.config['SECRET_KEY'] = test_config.get('SECRET_KEY') or os.environ.get('SECRET_KEY')
    if not app.config['SECRET_KEY'] and not test_config.get('TESTING'):
        logger.critical("SECRET_KEY not set in environment! Application cannot start.")
        raise RuntimeError("SECRET_KEY environment variable is required")

    # Test config wins, then DATABASE_URL, then a SQLite file in instance/
    db_env = os.environ.get('DATABASE_URL')
    if 'SQLALCHEMY_DATABASE_URI' in test_config:
        app.config['SQLALCHEMY_DATABASE_URI'] = test_config['SQLALCHEMY_DATABASE_URI']
    elif db_env:
        app.config['SQLALCHEMY_DATABASE_URI'] = db_env
    else:
        base_dir = Path(__file__).parent.parent
        instance_dir = base_dir / 'instance'
        instance_dir.mkdir(parents=True, exist_ok=True)
        default_db_path = instance_dir / 'foster_app.db'
        app.config['SQLALCHEMY_DATABASE_URI'] = f"sqlite:///{str(default_db_path.resolve())}"

    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    app.config['SESSION_COOKIE_SECURE'] = _env_flag('SESSION_COOKIE_SECURE', 'True')
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'

    # Overrides must land before db.init_app reads the database URI
    app.config.update(test_config)

    logger.debug(f"Database configured: {app.config['SQLALCHEMY_DATABASE_URI'].split(':', 1)[0]}")

    db.init_app(app)
    login_manager.init_app(app)

    logger.debug("Extensions initialized")

    # Import models to ensure they're registered with SQLAlchemy
    from foster_app.data.core.organization import Organization
    from foster_app.data.core.profile import FosterProfile
    from foster_app.data.animals.animal import Animal
    from foster_app.data.animals.animal_group import AnimalGroup
    from foster_app.data.requests.foster_request import FosterRequest
    from foster_app.data.messaging.conversation import Conversation
    from foster_app.data.messaging.message import Message, MessageLink

    logger.debug("Models imported and registered")

    from foster_app.presentation.routes.fostering import fostering_bp

    app.register_blueprint(fostering_bp, url_prefix='/fostering')

    # Add security headers to all responses
    @app.after_request
    def set_security_headers(response):
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        return response

    logger.info("Flask application initialization complete")

    return app
