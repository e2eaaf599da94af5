import os


def _env_flag(name, default='0'):
    return os.environ.get(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///namegame.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Smallest group a lecturer may create
    MIN_GROUP_MEMBERS = int(os.environ.get('MIN_GROUP_MEMBERS', '4'))
    # Search oracle (MediaWiki search API)
    ORACLE_API_URL = os.environ.get('ORACLE_API_URL') or 'https://he.wikipedia.org/w/api.php'
    ORACLE_TIMEOUT_SEC = float(os.environ.get('ORACLE_TIMEOUT_SEC', '10'))
    ORACLE_USER_AGENT = os.environ.get('ORACLE_USER_AGENT') or 'namegame-server/1.0 (classroom celebrity game)'
    # Pacing against the oracle's rate limits (seconds)
    QUERY_DELAY_SEC = float(os.environ.get('QUERY_DELAY_SEC', '0.15'))
    NAME_DELAY_SEC = float(os.environ.get('NAME_DELAY_SEC', '0.6'))
    RETRY_BACKOFF_SEC = float(os.environ.get('RETRY_BACKOFF_SEC', '2'))
    VERIFY_MAX_RETRIES = int(os.environ.get('VERIFY_MAX_RETRIES', '3'))
    # Optional: heartbeat interval for session timer logs (sec). 0 disables.
    SESSION_HEARTBEAT_SEC = int(os.environ.get('SESSION_HEARTBEAT_SEC', '0'))
    # Lecturer-only actions require a login when enabled
    REQUIRE_LECTURER_LOGIN = _env_flag('REQUIRE_LECTURER_LOGIN')
    LECTURER_USERNAME = os.environ.get('LECTURER_USERNAME') or 'lecturer'
    LECTURER_PASSWORD = os.environ.get('LECTURER_PASSWORD')
