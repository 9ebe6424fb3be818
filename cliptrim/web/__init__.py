"""Flask application factory for the ClipTrim web UI."""

from flask import Flask

from cliptrim.settings import Settings


def create_app(settings: Settings | None = None) -> Flask:
    app = Flask(__name__)
    app.config["SETTINGS"] = settings or Settings()
    # job_id -> job dict, scoped to this app instance
    app.config["JOBS"] = {}

    from cliptrim.web.routes import bp
    app.register_blueprint(bp)

    return app
