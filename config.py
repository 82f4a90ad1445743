import os
import secrets
import platform
from dotenv import load_dotenv

# Load environment variables from .env file(s)
load_dotenv()

basedir = os.path.abspath(os.path.dirname(__file__))


def ensure_data_directory():
    """Ensure data directory exists with proper permissions (cross-platform)"""
    data_dir = os.environ.get('DATA_DIR') or os.path.join(basedir, 'data')
    os.makedirs(data_dir, exist_ok=True)

    # Flask-Session filesystem store
    sessions_dir = os.path.join(data_dir, 'flask_sessions')
    os.makedirs(sessions_dir, exist_ok=True)

    if platform.system() != "Windows":
        try:
            os.chmod(data_dir, 0o755)
            os.chmod(sessions_dir, 0o755)
        except (OSError, PermissionError):
            # Ignore permission errors (common on mounted volumes)
            pass

    return data_dir


def _env_flag(name, default='false'):
    return os.environ.get(name, default).lower() in ['true', 'on', '1']


data_dir = ensure_data_directory()


class Config:
    DATA_DIR = data_dir

    # Security
    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY and (os.environ.get('FLASK_ENV') == 'development' or os.environ.get('FLASK_DEBUG')):
        # Every Gunicorn worker must share the key, so this is for development only
        SECRET_KEY = secrets.token_hex(32)
        print("⚠️  WARNING: Using temporary SECRET_KEY for development. Set SECRET_KEY in .env for production!")

    # CSRF
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = 3600  # 1 hour
    WTF_CSRF_SSL_STRICT = False

    # Cookies
    SESSION_COOKIE_SECURE = _env_flag('SESSION_COOKIE_SECURE')
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_PERMANENT = True
    PERMANENT_SESSION_LIFETIME = 86400 * 7  # 7 days, the backend refresh token outlives this

    # Flask-Session: 'filesystem', 'redis' or 'null' (signed cookie sessions)
    SESSION_TYPE = os.environ.get('SESSION_TYPE', 'filesystem')
    SESSION_USE_SIGNER = True
    SESSION_KEY_PREFIX = 'biodiversity:'
    SESSION_FILE_DIR = os.path.join(data_dir, 'flask_sessions')
    SESSION_FILE_THRESHOLD = 500

    # Hosted backend (Supabase)
    SUPABASE_URL = os.environ.get('SUPABASE_URL', '')
    SUPABASE_ANON_KEY = os.environ.get('SUPABASE_ANON_KEY', '')
    SUPABASE_TIMEOUT = float(os.environ.get('SUPABASE_TIMEOUT', 10))

    # Encyclopedia lookups
    WIKIPEDIA_OPENSEARCH_URL = os.environ.get('WIKIPEDIA_OPENSEARCH_URL', 'https://en.wikipedia.org/w/api.php')
    WIKIPEDIA_SUMMARY_URL = os.environ.get('WIKIPEDIA_SUMMARY_URL', 'https://en.wikipedia.org/api/rest_v1/page/summary')
    WIKIPEDIA_TIMEOUT = float(os.environ.get('WIKIPEDIA_TIMEOUT', 10))
    HTTP_USER_AGENT = os.environ.get('HTTP_USER_AGENT', 'BiodiversityHub/1.0 (species catalogue)')

    # Species speed chart data
    SPECIES_SPEED_CSV = os.environ.get('SPECIES_SPEED_CSV') or os.path.join(basedir, 'app', 'static', 'sample_animals.csv')

    # Application settings
    SITE_NAME = os.environ.get('SITE_NAME', 'Biodiversity Hub')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'ERROR')

    # Debug settings (disabled by default)
    DEBUG_MODE = _env_flag('BIODIVERSITY_DEBUG')
    DEBUG_AUTH = _env_flag('BIODIVERSITY_DEBUG_AUTH')
    DEBUG_REQUESTS = _env_flag('BIODIVERSITY_DEBUG_REQUESTS')


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    WTF_CSRF_ENABLED = False
    SESSION_TYPE = 'null'
    SUPABASE_URL = 'https://example.supabase.co'
    SUPABASE_ANON_KEY = 'test-anon-key'
