import time
from datetime import datetime


def now_iso() -> str:
    return datetime.now().replace(microsecond=0).isoformat()


def log_stamp() -> str:
    return time.strftime("%Y-%m-%d %H:%M:%S")
