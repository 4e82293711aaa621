# evoting/operations/health_monitor.py

# Liveness/Readiness health checks (DB, disk)

import shutil
from typing import Dict

from evoting.database.storage import ping
from evoting.errors import StorageError

MIN_FREE_DISK_GB = 1.0


def check_db() -> Dict:
    try:
        ping()
        return {"ok": True, "detail": "database ok"}
    except StorageError as e:
        return {"ok": False, "error": e.message, "retryable": e.retryable}


def _check_disk(path=".", min_free_gb=MIN_FREE_DISK_GB) -> Dict:
    total, used, free = shutil.disk_usage(path)
    free_gb = free / (1024**3)
    return {"ok": free_gb >= min_free_gb, "free_gb": round(free_gb, 2), "min_required_gb": min_free_gb}


def check_health(path=".") -> Dict:
    """Aggregate overall system health."""
    db = check_db()
    disk = _check_disk(path)
    return {"db": db, "disk": disk, "overall_ok": db["ok"] and disk["ok"]}
