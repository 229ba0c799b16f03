import os
import warnings
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _env_choice(name: str, default: str, allowed: set[str]) -> str:
    value = os.getenv(name, default).strip().lower()
    if value not in allowed:
        warnings.warn(
            f"{name}={value!r} is not one of {sorted(allowed)}; using {default!r}",
            RuntimeWarning,
            stacklevel=2,
        )
        return default
    return value


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./servicehub.db")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Frontend base URL (CORS origin for the customer/admin/employee portals)
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

# Work timer behaviour:
# "manual"          - timer is a RUNNING/STOPPED flag only, hours come from explicit time logs
# "derive_on_pause" - elapsed time between start and pause is logged automatically
TIMER_MODE = _env_choice("TIMER_MODE", "manual", {"manual", "derive_on_pause"})

# Reject progress reports that lower the percentage (default allows regression)
ENFORCE_MONOTONIC_PROGRESS = _env_flag("ENFORCE_MONOTONIC_PROGRESS")

# What to do when an assignment overlaps another appointment of the same employee:
# "allow" (no check), "warn" (log only) or "reject"
ASSIGNMENT_CONFLICT_POLICY = _env_choice(
    "ASSIGNMENT_CONFLICT_POLICY", "allow", {"allow", "warn", "reject"}
)

# Employees with this many appointments on a day are shown as unavailable (advisory)
MAX_DAILY_APPOINTMENTS = int(os.getenv("MAX_DAILY_APPOINTMENTS", "5"))

# Insert the default service catalog on startup when the services table is empty
SEED_DEFAULT_SERVICES = _env_flag("SEED_DEFAULT_SERVICES", "true")
