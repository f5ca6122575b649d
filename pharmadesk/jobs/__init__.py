# Background Jobs
from .alert_scheduler import AlertScheduler

__all__ = ["AlertScheduler"]
