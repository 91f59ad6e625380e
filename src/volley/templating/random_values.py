"""Random value generators for ``{{$random.<kind>[.<param>]}}`` placeholders.

All randomness comes from the ``secrets`` module. Every generator
returns a string; callers that need another type declare it in the
request's ``body_schema``.
"""

from __future__ import annotations

import secrets
import string
import time
from collections.abc import Callable
from datetime import datetime

ALPHANUMERIC = string.ascii_letters + string.digits

EMAIL_DOMAINS = ("test.com", "example.com", "demo.org", "mail.com")

PHONE_PREFIXES = (
    "130", "131", "132", "133", "134", "135", "136", "137", "138", "139",
    "150", "151", "152", "153", "155", "156", "157", "158", "159",
    "180", "181", "182", "183", "184", "185", "186", "187", "188", "189",
)

SURNAMES = (
    "张", "王", "李", "赵", "刘", "陈", "杨", "黄", "周", "吴",
    "徐", "孙", "马", "朱", "胡", "郭", "何", "林", "罗", "高",
)

GIVEN_NAMES = (
    "伟", "芳", "娜", "秀英", "敏", "静", "强", "磊", "军", "洋",
    "勇", "艳", "杰", "娟", "涛", "明", "超", "秀兰", "霞", "平",
    "刚", "桂英", "文", "华", "建", "国", "志", "海", "云", "峰",
)

USERNAME_PREFIXES = ("user", "test", "dev", "admin", "guest", "demo")

DEFAULT_STRING_LENGTH = 8
DEFAULT_NUMBER_LENGTH = 6


def random_string(length: int = DEFAULT_STRING_LENGTH) -> str:
    return "".join(secrets.choice(ALPHANUMERIC) for _ in range(length))


def random_number(length: int = DEFAULT_NUMBER_LENGTH) -> str:
    """``length`` decimal digits; the first digit is never 0."""
    first = secrets.choice("123456789")
    rest = "".join(secrets.choice(string.digits) for _ in range(length - 1))
    return first + rest


def random_uuid() -> str:
    """RFC 4122 version 4 UUID built from ``secrets`` bytes."""
    raw = bytearray(secrets.token_bytes(16))
    raw[6] = (raw[6] & 0x0F) | 0x40
    raw[8] = (raw[8] & 0x3F) | 0x80
    hexed = raw.hex()
    return f"{hexed[0:8]}-{hexed[8:12]}-{hexed[12:16]}-{hexed[16:20]}-{hexed[20:32]}"


def random_email() -> str:
    return f"{random_string(8)}@{secrets.choice(EMAIL_DOMAINS)}"


def random_phone() -> str:
    return secrets.choice(PHONE_PREFIXES) + random_number(8)


def random_name() -> str:
    return secrets.choice(SURNAMES) + secrets.choice(GIVEN_NAMES)


def random_username() -> str:
    return f"{secrets.choice(USERNAME_PREFIXES)}_{random_string(6)}"


def _length_param(param: str | None, default: int) -> int:
    if param and param.isascii() and param.isdigit() and int(param) > 0:
        return int(param)
    return default


GENERATORS: dict[str, Callable[[str | None], str]] = {
    "string": lambda p: random_string(_length_param(p, DEFAULT_STRING_LENGTH)),
    "number": lambda p: random_number(_length_param(p, DEFAULT_NUMBER_LENGTH)),
    "uuid": lambda p: random_uuid(),
    "timestamp": lambda p: str(time.time_ns() // 1_000_000),
    "datetime": lambda p: datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
    "date": lambda p: datetime.now().strftime("%Y-%m-%d"),
    "email": lambda p: random_email(),
    "phone": lambda p: random_phone(),
    "name": lambda p: random_name(),
    "username": lambda p: random_username(),
}


def generate_random_value(expression: str) -> str:
    """Evaluate a ``$random.<kind>[.<param>]`` expression.

    Returns an empty string for a bare ``$random`` or an unknown kind.
    """
    parts = expression.strip().split(".")
    if len(parts) < 2:
        return ""
    generator = GENERATORS.get(parts[1])
    if generator is None:
        return ""
    param = parts[2] if len(parts) >= 3 else None
    return generator(param)
