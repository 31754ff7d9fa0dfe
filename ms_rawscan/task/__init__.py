from .log_utils import LogUtilsMixin, logger


__all__ = [
    "LogUtilsMixin", "logger"
]
