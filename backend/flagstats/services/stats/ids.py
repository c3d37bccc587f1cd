import random
import time


def now_ms() -> int:
    return int(time.time() * 1000)


def new_id(prefix: str = 'id') -> str:
    """Short random id such as ``p_9f86d081a3c2_18b2c4e1f00``."""
    return f"{prefix}_{random.getrandbits(48):x}_{now_ms():x}"
