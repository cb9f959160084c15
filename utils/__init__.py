import logging
import time
from functools import wraps

SHORT_SHA_LENGTH = 6


def short_sha(sha: str, length: int = SHORT_SHA_LENGTH) -> str:
    """缩短 SHA 用于日志和显示"""
    return sha[:length] if sha else "-"


def timeit(func):
    """装饰器，用于测量函数执行时间

    Args:
        func: 被装饰的函数

    Returns:
        wrapper: 包装后的函数
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()  # 记录开始时间
        result = func(*args, **kwargs)  # 执行原函数
        end_time = time.time()  # 记录结束时间
        logging.debug("函数 %s 执行耗时：%.4f秒", func.__name__, end_time - start_time)
        return result

    return wrapper
