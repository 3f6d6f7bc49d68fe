import numpy as np


def parse_torque(text):
    text = "" if text is None else str(text)
    stripped = text.strip()
    if stripped == "":
        return None
    try:
        value = float(stripped)
    except ValueError:
        return None
    if not np.isfinite(value):
        return None
    return value


def format_torque(value) -> str:
    return f"{float(value):.2f}"


def format_rpm(rpm) -> str:
    return str(int(round(float(rpm))))


def values_differ(current, new, epsilon) -> bool:
    return abs(float(current) - float(new)) > epsilon
