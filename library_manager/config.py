import os


class Config:
    # --- Configuration ---
    SECRET_KEY = os.environ.get('SECRET_KEY', 'library_manager_dev_key_change_me')
    # Local MySQL database, root user with a blank password
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL', 'mysql+mysqlconnector://root:@localhost:3306/test'
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Idle delay before a search box fires its query
    SEARCH_DEBOUNCE_MS = int(os.environ.get('SEARCH_DEBOUNCE_MS', 350))
    PICKER_DEBOUNCE_MS = int(os.environ.get('PICKER_DEBOUNCE_MS', 300))

    DEFAULT_LOAN_DAYS = int(os.environ.get('DEFAULT_LOAN_DAYS', 14))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'testing'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    LOG_LEVEL = 'DEBUG'
