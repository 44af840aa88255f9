import uuid
from datetime import date, datetime


def new_id() -> str:
    return uuid.uuid4().hex


def counter_key(day: date | datetime) -> str:
    """Counter row key for a business day, ``yyyy-MM-dd``."""
    return day.strftime("%Y-%m-%d")


def format_display_id(day: date | datetime, count: int) -> str:
    """
    Human readable transaction id: ``MM-DD-NN``.
    Counts above 99 simply get wider.
    """
    return f"{day.strftime('%m-%d')}-{count:02d}"


def client_code(client_id: str) -> str:
    return "CN-" + client_id[:4].upper()


def product_code(product_id: str) -> str:
    return "PD-" + product_id[:3].upper().rjust(3, "0")


def vendor_code(vendor_id: str) -> str:
    return "VD-" + vendor_id[:4].upper()
