import os
from datetime import timedelta
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent

# DEV defaults: override through env vars in production.
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE = timedelta(minutes=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60")))

# signs the session cookie that carries flash messages
SESSION_SECRET_KEY = os.getenv("SESSION_SECRET_KEY", "change-me-too")

DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR}/late_policies.db")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Late policy
GRACE_PERIOD_MINUTES = int(os.getenv("GRACE_PERIOD_MINUTES", "10"))  # submissions within 10 mins after due are not late
MAX_PENALTY_LIMIT = 100  # upper bound for a policy's max_penalty
