import json
import logging
import os
from datetime import datetime

from utils import sub_dir


logger = logging.getLogger(__name__)

AUDIT_FILE_NAME = "audit_log.json"


def audit_file():
    return os.path.join(sub_dir("data"), AUDIT_FILE_NAME)


def load_audit_log():
    path = audit_file()
    if not os.path.exists(path):
        return []
    try:
        with open(path, "r", encoding="utf-8") as f:
            rows = json.load(f)
    except (OSError, ValueError):
        logger.warning("Audit log %s is unreadable, starting a new one", path)
        return []
    return rows if isinstance(rows, list) else []


def write_audit_log(
    user=None,
    module=None,
    action=None,
    reference=None,
    before=None,
    after=None,
    extra=None
):
    log = {
        "timestamp": datetime.now().strftime("%d-%m-%Y %H:%M:%S"),
        "user": user or "system",
        "module": module,
        "action": action,
        "reference": reference,
        "before": before,
        "after": after
    }

    if extra:
        log.update(extra)

    logs = load_audit_log()

    # Latest first.
    logs.insert(0, log)

    with open(audit_file(), "w", encoding="utf-8") as f:
        json.dump(logs, f, indent=2, default=str)

    return log
