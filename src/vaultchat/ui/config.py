"""UI configuration constants.

Labels, limits and log thresholds shared by the chat panel widgets.
"""


class LogLevel:
    """Thresholds for the log panel.

    Debug callbacks report levels as strings; the panel compares them as
    numbers and hides anything below its threshold.
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _BY_NAME = {"debug": DEBUG, "info": INFO, "warning": WARNING, "error": ERROR}

    @classmethod
    def name(cls, level: int) -> str:
        for label, value in cls._BY_NAME.items():
            if value == level:
                return label.upper()
        return "UNKNOWN"

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Parse a --log-level value; unknown names show everything."""
        return cls._BY_NAME.get(level_str.strip().lower(), cls.DEBUG)


APP_TITLE = "Vault Chat - Gemini"

# Input history configuration
INPUT_HISTORY_MAX_SIZE = 100

# Note suggestion list
NOTE_SUGGESTION_LIMIT = 10

# Context display previews
CONTEXT_PREVIEW_LENGTH = 50
MODEL_DESCRIPTION_PREVIEW_LENGTH = 100

# Log panel
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"

# Button labels
SEND_LABEL = "Send"
SENDING_LABEL = "Sending..."
MODE_CURRENT_LABEL = "Current note"
MODE_ALL_LABEL = "All notes"

# Notice durations (seconds)
NOTICE_SHORT = 3
NOTICE_LONG = 5

API_KEY_URL = "https://aistudio.google.com/app/apikey"
