import math
import os
import sys
from datetime import datetime
from typing import Any


def app_dir():
    """
    Returns base directory of app
    Works for:
    - normal python run
    - APP_BASE_DIR override (containers, tests)
    """
    env_base = os.getenv("APP_BASE_DIR", "").strip()
    if env_base:
        os.makedirs(env_base, exist_ok=True)
        return env_base

    if getattr(sys, "frozen", False):
        return os.path.dirname(sys.executable)

    return os.path.dirname(os.path.abspath(__file__))


def sub_dir(name: str) -> str:
    path = os.path.join(app_dir(), name)
    os.makedirs(path, exist_ok=True)
    return path


def to_float(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def to_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def now_str() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")
