from typing import Literal

from nat64_info.utils.modeling import ConfigSchema

LogLevelEnum = Literal["critical", "error", "warning", "notice", "info", "debug"]
LogTargetEnum = Literal["syslog", "stderr", "stdout"]


class LoggingSchema(ConfigSchema):
    """
    Logging and debugging configuration.

    ---
    level: Global logging level.
    target: Global logging stream target.
    """

    level: LogLevelEnum = "notice"
    target: LogTargetEnum = "stderr"
