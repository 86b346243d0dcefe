from .base import *  # noqa: F401,F403
from .base import DB_CONFIG

SECRET_KEY = "test-secret"
SESSION_SECRET = "test-session-secret"
TOKEN_TTL_DAYS = 7

DB_CONFIG = {**DB_CONFIG, "database": "gv_classroom_test"}

TESTING = True
LOG_LEVEL = "WARNING"

REHOMOLOGATION_POLICY = "overwrite"
AUTO_INIT_DB = False
AUTO_SEED_DB = False
