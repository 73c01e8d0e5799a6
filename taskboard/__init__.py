import logging

from flask import Flask, render_template
from flask_sqlalchemy import SQLAlchemy
from flask_wtf.csrf import CSRFProtect
from config import Config

db = SQLAlchemy()
csrf = CSRFProtect()


def configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    app.logger.setLevel(level)
    logging.getLogger('taskboard').setLevel(level)


def create_app(config_class=Config):
    # Configure Flask for serverless environment
    app = Flask(__name__, instance_relative_config=False, instance_path='/tmp')
    app.config.from_object(config_class)
    configure_logging(app)

    db.init_app(app)
    csrf.init_app(app)

    # Make csrf_token available in templates
    from flask_wtf.csrf import generate_csrf
    app.jinja_env.globals['csrf_token'] = generate_csrf

    from taskboard.utils.dates import describe_due_date, format_timestamp
    app.jinja_env.filters['due_date'] = describe_due_date
    app.jinja_env.filters['timestamp'] = format_timestamp

    from taskboard.blueprints.main import main_bp
    from taskboard.blueprints.tasks import tasks_bp
    from taskboard.blueprints.api import api_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(tasks_bp, url_prefix='/board')
    app.register_blueprint(api_bp, url_prefix='/api')

    # Error handlers
    @app.errorhandler(404)
    def not_found_error(error):
        return render_template('errors/404.html'), 404

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return render_template('errors/500.html'), 500

    # Import models to ensure they are registered with SQLAlchemy
    from taskboard.models import StoredValue

    if app.config.get('STORAGE_BACKEND') == 'database':
        with app.app_context():
            db.create_all()

    app.logger.debug('Task board ready (storage=%s, key=%s)',
                     app.config.get('STORAGE_BACKEND'), app.config.get('STORAGE_KEY'))
    return app
