import os

from config import Config


class ProductionConfig(Config):
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'taskboard-production-key'

    # Serverless hosts only allow writes under /tmp
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:////tmp/taskboard.db'

    # Fix for SQLAlchemy compatibility
    if SQLALCHEMY_DATABASE_URI and SQLALCHEMY_DATABASE_URI.startswith("postgres://"):
        SQLALCHEMY_DATABASE_URI = SQLALCHEMY_DATABASE_URI.replace("postgres://", "postgresql://", 1)

    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = None
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'WARNING')
