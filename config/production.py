import os

from .base import *  # noqa: F401,F403

# no fallback: TokenService refuses an empty secret
SECRET_KEY = os.getenv("SECRET_KEY", "")
