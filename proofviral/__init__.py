import logging
from flask import Flask, jsonify
from flask_cors import CORS
from flask_migrate import Migrate
from proofviral.config import Config
from proofviral.extensions import db, jwt

migrate = Migrate()

def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))
    
    # Initialize extensions
    db.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)
    CORS(app)
    
    # Health check endpoint - register early so it's always available
    @app.route('/api/health', methods=['GET'])
    def health():
        return jsonify({"status": "ok"}), 200
    
    # Import models so they are registered with SQLAlchemy / Alembic
    from proofviral import models  # noqa: F401
    
    # Register blueprints
    from proofviral.api import auth
    app.register_blueprint(auth.bp, url_prefix='/api/auth')
    from proofviral.api import reviews
    app.register_blueprint(reviews.bp, url_prefix='/api/reviews')
    from proofviral.api import public
    app.register_blueprint(public.bp, url_prefix='/api/public')
    from proofviral.api import widget
    app.register_blueprint(widget.bp, url_prefix='/api/widget')
    app.register_blueprint(widget.embed_bp)
    from proofviral.api import dashboard
    app.register_blueprint(dashboard.bp, url_prefix='/api/dashboard')
    from proofviral.api import settings
    app.register_blueprint(settings.bp, url_prefix='/api/settings')
    from proofviral.api import billing
    app.register_blueprint(billing.bp, url_prefix='/api/billing')
    
    from proofviral.cli import widget_preview
    app.cli.add_command(widget_preview)

    # JWT error handlers for clearer responses
    from proofviral.services.session import is_token_revoked

    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        return is_token_revoked(jwt_payload)

    @jwt.unauthorized_loader
    def jwt_missing_token(err):
        return jsonify({"error": "Unauthorized", "details": err}), 401

    @jwt.invalid_token_loader
    def jwt_invalid_token(err):
        return jsonify({"error": "Invalid token", "details": err}), 401

    @jwt.expired_token_loader
    def jwt_expired_token(header, payload):
        return jsonify({"error": "Token expired"}), 401

    @jwt.revoked_token_loader
    def jwt_revoked_token(header, payload):
        return jsonify({"error": "Token has been revoked"}), 401
    
    return app
