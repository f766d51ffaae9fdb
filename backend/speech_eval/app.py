"""
Speech Evaluation Engine - Web Application
==========================================
Main application entry point that configures Flask and registers blueprints.

This module:
- Creates the Flask application factory
- Registers the scoring and analysis blueprints
- Defines core routes (/health)
- Returns JSON for every error

Route Organization:
- /health               -> Health check
- /api/scoring/*        -> Catalog, scoring and category summaries
- /api/analysis/*       -> AI language analysis and mapping

Run with the backend directory on sys.path:
    python -m speech_eval.app
"""

from flask import Flask, jsonify
from flask_cors import CORS

from speech_eval.routes.scoring_routes import scoring_bp
from speech_eval.routes.analysis_routes import analysis_bp
from speech_eval.catalog import get_default_catalog
from speech_eval.config import get_config, apply_environment_overrides
from speech_eval.logging_config import get_engine_logger

# Initialize configuration with environment overrides
config = get_config()
apply_environment_overrides(config)

logger = get_engine_logger("app", log_to_file=False)

__version__ = "1.0.0"


def create_app(config_override=None, analysis_service=None):
    """
    Application factory function.

    Args:
        config_override: Optional AppConfig instance to use instead of global config
        analysis_service: Optional SpeechAnalysisService (built on first
            /api/analysis/analyze call when omitted)

    Returns:
        Configured Flask application instance
    """
    app_config = config_override or get_config()

    app = Flask(__name__)
    CORS(app, origins=app_config.flask.cors_origins)

    # Store config and services on the app for access in routes
    app.app_config = app_config
    app.analysis_service = analysis_service

    app.config['SECRET_KEY'] = app_config.flask.secret_key

    # ==========================================================================
    # REGISTER BLUEPRINTS
    # ==========================================================================

    app.register_blueprint(scoring_bp, url_prefix='/api/scoring')
    app.register_blueprint(analysis_bp, url_prefix='/api/analysis')

    if app_config.logging.log_to_file:
        app_config.paths.ensure_directories()

    logger.info(
        "Initialized Flask app",
        extra={
            'score_ceiling': app_config.scoring.score_ceiling,
            'gemini_model': app_config.gemini.model_name,
            'gemini_configured': bool(app_config.gemini.api_key),
        }
    )

    # ==========================================================================
    # CORE ROUTES
    # ==========================================================================

    @app.route('/health', methods=['GET'])
    def health_check():
        """Health check endpoint for monitoring."""
        return {
            'status': 'healthy',
            'skills': len(get_default_catalog()),
            'version': __version__
        }, 200

    # ==========================================================================
    # ERROR HANDLERS
    # ==========================================================================

    @app.errorhandler(400)
    def bad_request(error):
        return jsonify({'error': 'Bad request'}), 400

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return jsonify({'error': 'Resource not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'error': 'Method not allowed'}), 405

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        logger.error(f"Internal server error: {error}")
        return jsonify({'error': 'Internal server error'}), 500

    return app


if __name__ == '__main__':
    app = create_app()
    flask_config = get_config().flask
    app.run(
        debug=flask_config.debug,
        host=flask_config.host,
        port=flask_config.port
    )
