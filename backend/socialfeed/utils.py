import re
from datetime import datetime

import pytz

_CONTROL_CHARS = re.compile(r"[\u0000-\u001F\u007F-\u009F]")


def now_utc_naive() -> datetime:
    """
    Current time in UTC without tzinfo, the form every timestamp column is stored in.
    """
    return datetime.now(pytz.utc).replace(tzinfo=None)


def strip_control_characters(text: str) -> str:
    return _CONTROL_CHARS.sub("", text)


def chunked(items: list, size: int) -> list[list]:
    return [items[i : i + size] for i in range(0, len(items), size)]
