import os


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'taskboard-dev-key'

    # Local key-value storage lives in a single SQLite table by default
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(os.path.abspath(os.path.dirname(__file__)), 'taskboard.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    WTF_CSRF_ENABLED = True

    STORAGE_BACKEND = os.environ.get('STORAGE_BACKEND', 'database')  # database, memory
    STORAGE_KEY = os.environ.get('STORAGE_KEY', 'boards')

    TASKS_PER_PAGE = int(os.environ.get('TASKS_PER_PAGE', 5))
    TASKS_PER_PAGE_OPTIONS = (5, 10, 25)
    NOTIFICATION_TIMEOUT_MS = 3000

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    WTF_CSRF_ENABLED = False
    LOG_LEVEL = 'DEBUG'
