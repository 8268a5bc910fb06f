"""
File: app/utils/timestamp.py
Description: 时钟工具 (Unix 秒级时间戳)
"""

import time


def now_timestamp() -> int:
    """当前 Unix 时间戳 (秒)"""
    return int(time.time())
