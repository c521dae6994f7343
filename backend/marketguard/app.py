"""
Flask application factory.
Creates and configures the Flask application with all routes, middleware, and error handlers.
"""
import logging
from flask import Flask, jsonify
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge, TooManyRequests

from marketguard.config.settings import get_config
from marketguard.middleware.security_headers import apply_security_headers
from marketguard.routes.upload import upload_bp
from marketguard.routes.validate import validate_bp
from marketguard.utils.sanitizer import configure_html_sanitizer, sanitize_error_message

logger = logging.getLogger(__name__)


def create_app(config_name='development'):
    """
    Application factory for creating Flask app.

    Args:
        config_name: Environment name ('development', 'production', 'testing')

    Returns:
        Tuple of (app, limiter)
    """
    app = Flask(__name__)

    # Load configuration
    config = get_config(config_name)
    app.config.from_object(config)

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Uploads get one extra MB for the multipart envelope so that slightly
    # oversized files reach the upload policy and get its message
    app.config["MAX_CONTENT_LENGTH"] = int((config.MAX_UPLOAD_MB + 1) * 1024 * 1024)

    # The HTML backend is chosen once, here
    sanitizer = configure_html_sanitizer(config.HTML_SANITIZER)
    logger.info("HTML sanitizer backend: %s", sanitizer.name)

    # Initialize rate limiter
    limiter = Limiter(
        get_remote_address,
        storage_uri=config.RATELIMIT_STORAGE_URI,
        app=app,
        default_limits=config.DEFAULT_RATE_LIMITS
    )

    # Error handlers
    @app.errorhandler(RequestEntityTooLarge)
    def payload_too_large(e):
        return jsonify({
            "error": f"Request body too large. Maximum upload size is {config.MAX_UPLOAD_MB:g} MB, maximum JSON body is {config.MAX_BODY_KB} KB."
        }), e.code

    @app.errorhandler(TooManyRequests)
    def ratelimit_error(e):
        return jsonify({"error": "Too many requests. Please try again later."}), 429

    @app.errorhandler(Exception)
    def unhandled_error(e):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.description}), e.code
        logger.exception("Unhandled error")
        return jsonify({"error": sanitize_error_message(e)}), 500

    app.after_request(apply_security_headers)

    # Rate limit for the validation endpoints
    limiter.limit(config.VALIDATE_RATE_LIMIT)(validate_bp)

    # Register blueprints
    app.register_blueprint(validate_bp)
    app.register_blueprint(upload_bp)

    # Health check routes
    @app.get('/')
    @limiter.exempt
    def root():
        return jsonify({"message": "Server is running."}), 200

    @app.get('/health')
    @limiter.exempt
    def health():
        return jsonify({"status": "healthy"}), 200

    return app, limiter
