"""
Process-wide runtime shared across all routes.

Built once at startup by main's lifespan; the event log lives here for the
life of the process and is never persisted.
"""

from typing import Optional

from capture.host import EditorHost
from capture.recorder import ActivityRecorder
from capture.ring_buffer import BoundedEventLog
from config import Settings
from context.git_status import GitStatusProvider
from context.pollers import HostStatePoller
from delivery.sink import HttpSink, LogSink
from models.event import Event


class Runtime:
    def __init__(self, settings: Settings):
        self.settings = settings
        self.host = EditorHost()
        self.log: BoundedEventLog[Event] = BoundedEventLog(settings.event_buffer_size)
        self.recorder = ActivityRecorder(self.log, self.host)
        self.poller = HostStatePoller(self.host, GitStatusProvider(settings.repo_path))
        self.local_sink = LogSink()
        self.http_sink: Optional[HttpSink] = (
            HttpSink(settings.endpoint, settings.http_timeout) if settings.endpoint else None
        )

    def start(self) -> None:
        self.recorder.start()

    def stop(self) -> None:
        self.recorder.dispose()


runtime: Optional[Runtime] = None


def get_runtime() -> Runtime:
    if runtime is None:
        raise RuntimeError("runtime not started")
    return runtime
