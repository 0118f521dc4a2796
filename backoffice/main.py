# Flask App Initializations
import os

from flask import Flask
from flask_wtf.csrf import CSRFError

from backoffice.errors import error_response, NotFound, MethodNotAllowed, InternalError, ValidationError
from backoffice.extensions import db, bcrypt, login_manager, csrf, migrate


def create_app(test_config=None):
    app = Flask(__name__, instance_relative_config=True)

    # Configuration
    app.config["SECRET_KEY"] = os.environ.get("FLASK_SECRET_KEY", "dev_secret_key_123!@#")
    app.config["WTF_CSRF_ENABLED"] = True
    db_path = os.path.join(app.instance_path, "backoffice.db")
    app.config["SQLALCHEMY_DATABASE_URI"] = os.environ.get("DATABASE_URL", f"sqlite:///{db_path}")
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["LOW_STOCK_THRESHOLD"] = int(os.environ.get("LOW_STOCK_THRESHOLD", 5))
    app.config["LOG_LEVEL"] = os.environ.get("LOG_LEVEL", "INFO")

    if test_config is not None:
        app.config.from_mapping(test_config)

    try:
        os.makedirs(app.instance_path)
    except OSError:
        pass

    app.logger.setLevel(app.config["LOG_LEVEL"].upper())
    app.json.sort_keys = False

    db.init_app(app)
    bcrypt.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)

    # Models must be imported before create_all / migrations see the metadata
    from backoffice import models  # noqa: F401
    from backoffice import auth  # noqa: F401 registers the user_loader

    from backoffice.routes.auth_api import auth_bp
    from backoffice.routes.supplier_api import supplier_bp
    from backoffice.routes.admin_api import admin_bp
    from backoffice.routes.public_api import public_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(supplier_bp, url_prefix="/api/supplier")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")
    app.register_blueprint(public_bp)

    from backoffice.cli import register_commands
    register_commands(app)

    @app.errorhandler(404)
    def not_found_handler(e):
        return error_response(NotFound("Resource not found"))

    @app.errorhandler(405)
    def method_not_allowed_handler(e):
        return error_response(MethodNotAllowed())

    @app.errorhandler(CSRFError)
    def csrf_error_handler(e):
        app.logger.warning(f"CSRF check failed: {e.description}")
        return error_response(ValidationError(e.description))

    @app.errorhandler(500)
    def internal_server_error_handler(e):
        app.logger.error(f"Internal Server Error: {e}", exc_info=True)
        return error_response(InternalError())

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True, host="0.0.0.0")
