import os
import logging
from flask import Flask, current_app, redirect, url_for, render_template
from dotenv import load_dotenv

from .config import DevConfig, ProdConfig


def get_controller():
    """The LifecycleController owned by the current app."""
    return current_app.extensions['stoneworks']


def create_app(config_name: str | None = None) -> Flask:
    """Application factory with environment based configuration."""
    load_dotenv()

    project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
    app = Flask(
        __name__,
        static_folder=os.path.join(project_root, 'static'),
        static_url_path='/static',
    )

    # Pick configuration
    env = config_name or os.getenv('ENV') or os.getenv('FLASK_ENV') or 'production'
    cfg_cls = DevConfig if env == 'development' else ProdConfig
    app.config.from_object(cfg_cls)

    # Initialise logging
    logging.basicConfig(level=logging.DEBUG if app.debug else logging.INFO)

    from stoneworks.api.estimates_api import EstimatesApi
    from stoneworks.estimates.controller import LifecycleController
    from stoneworks.notifications import notify_user

    api = EstimatesApi(
        base_url=app.config['ESTIMATES_API_URL'],
        timeout=app.config['ESTIMATES_API_TIMEOUT'],
    )
    app.extensions['stoneworks'] = LifecycleController(api, notify=notify_user)

    @app.route('/')
    def index():
        return redirect(url_for('estimates.list_estimates'))

    @app.errorhandler(404)
    def not_found(_):
        return render_template('errors/404.html'), 404

    @app.errorhandler(500)
    def server_error(_):
        return render_template('errors/500.html'), 500

    from stoneworks.estimates.routes import bp as estimates_bp
    from stoneworks.cli import estimates_cli, tasks_cli

    app.register_blueprint(estimates_bp, url_prefix='/estimates')
    app.cli.add_command(estimates_cli)
    app.cli.add_command(tasks_cli)

    return app
