# Common utilities
from hotcert.common.config import Config as Config
from hotcert.common.logging_utils import NullSink as NullSink
from hotcert.common.logging_utils import setup_logger as setup_logger
from hotcert.common.rwlock import ReadWriteLock as ReadWriteLock

__all__ = ["Config", "NullSink", "ReadWriteLock", "setup_logger"]
