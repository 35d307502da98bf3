"""Sync Code 生成与存储键规范化

Sync Code 使用去除易混淆字符（I、O、0、1）的字母表，由 CSPRNG 生成。
"""

import re
import secrets

from .config import SYNC_CODE_LENGTH

SYNC_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"

KEY_PREFIX = "pxgDaily:DB:"
ACTIVE_USER_KEY = "pxgDaily:ACTIVE_USER"
KEY_SEPARATOR = "::"

_NON_ALNUM = re.compile(r"[^A-Z0-9]")


def generate_sync_code(length: int = SYNC_CODE_LENGTH) -> str:
    """生成新的 Sync Code"""
    return "".join(secrets.choice(SYNC_CODE_ALPHABET) for _ in range(length))


def normalize_code(value: str) -> str:
    """去首尾空白、转大写、去掉所有非字母数字字符"""
    return _NON_ALNUM.sub("", value.strip().upper())


def profile_key(name: str, sync_code: str) -> str:
    """(名称, Sync Code) 对应的存储键，如 pxgDaily:DB:ASH::AB2C"""
    return f"{KEY_PREFIX}{normalize_code(name)}{KEY_SEPARATOR}{normalize_code(sync_code)}"
