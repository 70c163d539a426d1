from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from enum import Enum
from typing import Any, cast


class LogTarget(str, Enum):
    STDOUT = "stdout"
    SYSLOG = "syslog"
    STDERR = "stderr"


NOTICE = (logging.WARNING + logging.INFO) // 2

_config_to_level = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "notice": NOTICE,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

_level_to_name = {
    logging.CRITICAL: "CRIT",
    logging.ERROR: "ERRO",
    logging.WARNING: "WARN",
    NOTICE: "NOTI",
    logging.INFO: "INFO",
    logging.DEBUG: "DEBG",
}


class Nat64Logger(logging.Logger):
    def notice(self, message: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(NOTICE):
            self._log(NOTICE, message, args, **kwargs)


logging.setLoggerClass(Nat64Logger)


for level, name in _level_to_name.items():
    logging.addLevelName(level, name)


def get_logger(name: str) -> Nat64Logger:
    return cast(Nat64Logger, logging.getLogger(name))


def get_log_level(level: str) -> int:
    return _config_to_level[level]


# set to "true" when the output goes to a log collector that adds its own timestamps
NO_PREFIX_FORMAT_ENV_VAR = "NAT64_LOGGING_NO_PREFIX_FORMAT"

MESSAGE_FORMAT = "%(name)s: %(message)s"


def get_formatter(service: str, target: LogTarget) -> logging.Formatter:
    if target is LogTarget.SYSLOG:
        # syslog adds its own timestamp and process info
        return logging.Formatter(MESSAGE_FORMAT)
    if os.environ.get(NO_PREFIX_FORMAT_ENV_VAR) == "true":
        return logging.Formatter(f"[%(levelname)s] {MESSAGE_FORMAT}")

    stream = "(stderr)" if target is LogTarget.STDERR else ""
    return logging.Formatter(f"%(asctime)s {service}[%(process)d]{stream}: [%(levelname)s] {MESSAGE_FORMAT}")


def get_logging_handler(target: LogTarget) -> logging.Handler:
    if target is LogTarget.SYSLOG:
        return logging.handlers.SysLogHandler(address="/dev/log")
    return logging.StreamHandler(sys.stderr if target is LogTarget.STDERR else sys.stdout)


def start_logging(service: str, level: str, target: str) -> None:
    """
    Send the logs of the whole process to 'target' (stdout, stderr or syslog).

    Can be called repeatedly, the handler installed by the previous call is replaced.
    Used once at startup and once more after the configuration file is loaded.
    """

    log_target = LogTarget(target)
    handler = get_logging_handler(log_target)
    handler.setFormatter(get_formatter(service, log_target))

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
    root.addHandler(handler)
    root.setLevel(get_log_level(level))
