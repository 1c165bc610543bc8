from enum import Enum


class BuildMethod(str, Enum):
    DOCKER = "docker"
    UNKNOWN = "unknown"


class TriggerType(str, Enum):
    POLLING = "polling"
    NOTIFY = "notify"
