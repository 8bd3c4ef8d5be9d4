from enum import Enum


class ProgressStatus(str, Enum):
    succeeded = "Succeeded"
    failed = "Failed"


class BuildStepEvent:
    def __init__(self, *args, **kwargs):
        self._callbacks = []

    def set(self, *callbacks):
        self._callbacks = callbacks

    def clear(self):
        self._callbacks = []

    def emit(self, *args, **kwargs):
        for callback in self._callbacks:
            callback(*args, **kwargs)


class BuildStepEventGroup:
    """Emits on every grouped event, e.g. a message shown both in the status
    label and in the full log."""

    def __init__(self, *events: BuildStepEvent):
        self.events = events

    def set(self, *callbacks):
        for event in self.events:
            event.set(*callbacks)

    def clear(self):
        for event in self.events:
            event.clear()

    def emit(self, *args, **kwargs):
        for event in self.events:
            event.emit(*args, **kwargs)


class BuildStep:
    start = BuildStepEvent(str)
    long_message = BuildStepEvent(str)
    short_message = BuildStepEvent(str)
    message = BuildStepEventGroup(short_message, long_message)
    warning = BuildStepEvent(str)
    error = BuildStepEvent(str)
    progress = BuildStepEvent(int, int)
    end = BuildStepEvent(str, ProgressStatus)

    @classmethod
    def clear_all(cls):
        for event in (
            cls.start,
            cls.long_message,
            cls.short_message,
            cls.warning,
            cls.error,
            cls.progress,
            cls.end,
        ):
            event.clear()
