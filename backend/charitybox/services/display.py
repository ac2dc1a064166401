import logging
import threading

from charitybox.core.exceptions import InvalidInput

logger = logging.getLogger(__name__)


class DisplayMessageStore:
    """The two-line message shown on the box's 16x2 LCD.

    One instance lives on the application; reads and writes are guarded by a
    lock and the last write wins.
    """

    def __init__(self, line1: str, line2: str, max_chars: int = 16):
        self.max_chars = max_chars
        self._lock = threading.Lock()
        self._line1 = line1[:max_chars]
        self._line2 = line2[:max_chars]

    def get(self) -> dict:
        with self._lock:
            return {"line1": self._line1, "line2": self._line2}

    def set(self, line1="", line2="") -> dict:
        if not isinstance(line1, str) or not isinstance(line2, str):
            raise InvalidInput("Invalid message format. line1 and line2 must be strings")

        with self._lock:
            self._line1 = line1[: self.max_chars]
            self._line2 = line2[: self.max_chars]
            message = {"line1": self._line1, "line2": self._line2}

        logger.info("LCD message updated: %s", message)
        return message
