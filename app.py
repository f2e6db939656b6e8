import os
import logging
from datetime import datetime
from uuid import uuid4

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from flask import Flask, request, g
from flask_cors import CORS

from config import Config
from beatify.auth import init_auth
from beatify.database.db_manager import initialize_database
from beatify.domain.library import LibraryService
from beatify.domain.providers import (
    FallbackOrchestrator,
    ProviderName,
    build_default_registry,
)
from beatify.interfaces.http import register_error_handlers
from beatify.interfaces.http.routes import health_bp, library_bp, music_bp
from beatify.observability import configure_structured_logging, metrics_blueprint
from beatify.settings import load_app_settings


logger = logging.getLogger(__name__)


def configure_logging(log_dir: str) -> str:
    """
    Configure root logging with:
      - FileHandler (INFO+) to a new file per run: log-YYYY-MM-DD-HH-MM-SS
      - StreamHandler (WARNING+) to console when ENABLE_CONSOLE_LOGS is set

    Returns the path to the created log file.
    """
    os.makedirs(log_dir, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
    log_path = os.path.join(log_dir, f"log-{timestamp}")

    root = logging.getLogger()
    root.setLevel(logging.INFO)

    # Keep the JSON stdout handler; drop stale file handlers
    root.handlers = [h for h in root.handlers if not isinstance(h, logging.FileHandler)]

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    file_handler = logging.FileHandler(log_path, encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    if Config.ENABLE_CONSOLE_LOGS:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    for name in ("werkzeug", "flask.app"):
        _l = logging.getLogger(name)
        _l.setLevel(logging.INFO)
        _l.handlers = []
        _l.propagate = True

    return log_path


def create_app(test_config=None, *, provider_registry=None):
    """Application factory.

    ``test_config`` is applied over :class:`config.Config`; a prebuilt
    ``provider_registry`` replaces the one built from credentials.
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    configure_structured_logging(app)

    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get('X-Request-ID') or uuid4().hex

    @app.after_request
    def _inject_request_id(response):
        if getattr(g, 'request_id', None):
            response.headers.setdefault('X-Request-ID', g.request_id)
        return response

    allowed_origins = sorted({
        origin.strip()
        for origin in app.config['CORS_ALLOWED_ORIGINS']
        if origin and origin.strip() and origin.strip() != "*"
    })
    CORS(
        app,
        resources={r"/api/*": {"origins": allowed_origins}},
        supports_credentials=True,
        expose_headers=["Retry-After", "X-Request-ID"],
    )

    initialize_database(app)
    init_auth(app)
    register_error_handlers(app)

    settings = load_app_settings({'default_music_service': app.config.get('DEFAULT_MUSIC_SERVICE')})
    if provider_registry is None:
        provider_registry = build_default_registry(
            settings,
            spotify_client_id=app.config.get('SPOTIPY_CLIENT_ID'),
            spotify_client_secret=app.config.get('SPOTIPY_CLIENT_SECRET'),
            youtube_api_key=app.config.get('YOUTUBE_API_KEY'),
            soundcloud_client_id=app.config.get('SOUNDCLOUD_CLIENT_ID'),
        )
    app.config['DEFAULT_MUSIC_SERVICE'] = settings.default_music_service

    app.extensions['catalog_settings'] = settings
    app.extensions['provider_registry'] = provider_registry
    app.extensions['spotify_provider'] = provider_registry.get(ProviderName.SPOTIFY)
    app.extensions['fallback_orchestrator'] = FallbackOrchestrator(
        provider_registry, default_provider=settings.default_music_service
    )
    app.extensions['library_service'] = LibraryService()

    status = provider_registry.status()
    app.logger.info("Music providers configured: %s", status)
    if not status.get(ProviderName.SPOTIFY.value):
        app.logger.warning("Spotify credentials missing; mood requests will fall back to YouTube.")

    # --- Register Blueprints ---
    app.register_blueprint(music_bp)
    app.register_blueprint(library_bp)
    app.register_blueprint(health_bp)
    app.register_blueprint(metrics_blueprint)

    return app


if __name__ == '__main__':
    # With the reloader, only the child process writes a log file
    debug_mode = bool(Config.DEBUG)
    if not debug_mode or os.environ.get('WERKZEUG_RUN_MAIN') == 'true':
        log_file_path = configure_logging(Config.LOG_DIR)
        logger.info("File logging initialized at %s", log_file_path)

    if not Config.SPOTIPY_CLIENT_ID or not Config.SPOTIPY_CLIENT_SECRET:
        logger.warning("Spotify API client ID or client secret not found in environment variables.")
        logger.warning("Please set SPOTIPY_CLIENT_ID and SPOTIPY_CLIENT_SECRET for full functionality.")

    app = create_app()
    app.logger.handlers = []
    app.logger.setLevel(logging.INFO)
    app.logger.propagate = True
    logger.info("Starting Flask application...")
    app.run(debug=debug_mode, host='0.0.0.0', port=int(os.getenv('PORT', '5000')), threaded=True)
