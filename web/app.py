"""Flask entrypoint for the channel pulse app."""

from __future__ import annotations

from flask import Flask, jsonify
from werkzeug.middleware.proxy_fix import ProxyFix

from web.config import AppConfig
from web.routes.api import api_bp
from web.routes.pages import pages_bp



def create_app() -> Flask:
    app = Flask(__name__, template_folder="templates", static_folder="static")

    config = AppConfig.from_env()
    app.config.update(config.to_flask_config())
    app.json.sort_keys = False

    app.register_blueprint(pages_bp)
    app.register_blueprint(api_bp)

    @app.get("/healthz")
    def healthz():
        return jsonify({"status": "ok"})

    @app.context_processor
    def inject_globals():
        return {
            "app_name": "Channel Pulse",
            "env_name": app.config.get("APP_ENV", "development"),
        }

    @app.template_filter("thousands")
    def thousands(value) -> str:
        try:
            return f"{round(float(value)):,}"
        except (TypeError, ValueError):
            return str(value)

    if app.config.get("TRUST_PROXY"):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)
    return app


app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=8080, debug=app.config.get("APP_ENV") != "production")
