"""Smoke test for the serverless entry point."""
import importlib.util
import os

import config_prod

ENTRYPOINT = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'api', 'index.py')


def test_entrypoint_builds_production_app(monkeypatch):
    monkeypatch.setattr(config_prod.ProductionConfig, 'SQLALCHEMY_DATABASE_URI', 'sqlite://')
    spec = importlib.util.spec_from_file_location('taskboard_entrypoint', ENTRYPOINT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    app = module.app
    assert app.config['WTF_CSRF_ENABLED'] is True
    assert app.config['LOG_LEVEL'] in ('WARNING', os.environ.get('LOG_LEVEL'))
    assert app.test_client().get('/').status_code == 200
