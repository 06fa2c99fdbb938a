import logging
import threading
from typing import Dict, Iterator, List

logger = logging.getLogger(__name__)


class LogMessages:
    """
    Deduplicated, insertion-ordered collector of human readable diagnostics
    for one analysis run. Safe to share between threads.
    """

    def __init__(self):
        self._messages: Dict[str, None] = {}
        self._lock = threading.Lock()

    def add(self, message: str):
        with self._lock:
            if message in self._messages:
                return
            self._messages[message] = None

        logger.debug(f"[log] {message}")

    def as_list(self) -> List[str]:
        with self._lock:
            return list(self._messages)

    def __contains__(self, message) -> bool:
        return message in self._messages

    def __iter__(self) -> Iterator[str]:
        return iter(self.as_list())

    def __len__(self) -> int:
        return len(self._messages)
