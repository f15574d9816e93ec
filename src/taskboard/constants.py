STATE_DIR_NAME = ".taskboard"
PROJECTS_FILE = "projects.yaml"
PROJECTS_LOCK_FILE = "projects.lock"
CONFIG_FILE = "config.yaml"
WINDOWS_LOCK_BYTES = 4096

SCHEMA_VERSION = 1

DEFAULT_STAGE = "Requested"

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 30

ORDER_ON_CREATE_GLOBAL = "global"  # count of every task in the project
ORDER_ON_CREATE_STAGE = "stage"  # count of tasks already in the target stage
ORDER_ON_CREATE_MODES = (ORDER_ON_CREATE_GLOBAL, ORDER_ON_CREATE_STAGE)

ENV_ORDER_ON_CREATE = "TASKBOARD_ORDER_ON_CREATE"
ENV_SERIALIZE_CREATION = "TASKBOARD_SERIALIZE_CREATION"
ENV_LOG_LEVEL = "TASKBOARD_LOG_LEVEL"
