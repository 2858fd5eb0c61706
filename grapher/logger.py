import logging
from collections import deque


class _RecentHandler(logging.Handler):
    """Keeps (level, message) pairs for the last few records that got through."""

    def __init__(self, size):
        super().__init__()
        self.records = deque(maxlen=size)

    def emit(self, record):
        self.records.append((record.levelname, record.getMessage()))


class GrapherLogger:
    """
    The package logger. Console output starts at WARNING so a host program
    only hears about compile failures and sampling errors; ``setLevel`` opens
    it up. The most recent messages are also kept for a UI to ``drain()``.
    """

    _max_msgs: int = 20

    def __init__(self, name, level=logging.WARNING):
        self.logger = logging.getLogger(name)

        # Modules can be reloaded; attach handlers once per named logger
        recent = next((h for h in self.logger.handlers if isinstance(h, _RecentHandler)), None)
        if recent is None:
            console = logging.StreamHandler()
            console.setFormatter(logging.Formatter("[GRAPHER] [%(levelname)s] %(message)s"))
            recent = _RecentHandler(GrapherLogger._max_msgs)
            recent.setLevel(logging.INFO)
            self.logger.addHandler(console)
            self.logger.addHandler(recent)
            self.logger.setLevel(level)
        self._recent = recent

        self.logger.propagate = False

    @property
    def level(self):
        return self.logger.level

    def setLevel(self, level):
        self.logger.setLevel(level)

    def debug(self, msg):
        self.logger.debug(msg)

    def info(self, msg):
        self.logger.info(msg)

    def warn(self, msg):
        self.logger.warning(msg)

    def error(self, msg, exc: Exception = None):
        if exc is not None:
            self.logger.error(f"{msg}: {exc}", exc_info=exc)
        else:
            self.logger.error(msg)

    def drain(self):
        """Pop the kept messages, newest first."""
        msgs = []
        while self._recent.records:
            msgs.append(self._recent.records.pop())
        return msgs


LOGGER = GrapherLogger("grapher")
