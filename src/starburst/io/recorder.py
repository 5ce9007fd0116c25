# io/recorder.py
import json
import logging
import sys
from dataclasses import asdict

from starburst.app.protocols import Sink

log = logging.getLogger("starburst.recorder")


class JsonlSink:
    def __init__(self, fp=None):
        self.fp = fp  # None => whatever sys.stdout is at write time

    def write(self, ev) -> None:
        (self.fp or sys.stdout).write(json.dumps(asdict(ev)) + "\n")


class MemorySink:
    def __init__(self):
        self.events: list = []

    def write(self, ev) -> None:
        self.events.append(ev)


class Recorder:
    def __init__(self, *sinks: Sink):
        self.sinks = sinks or (JsonlSink(),)

    def emit(self, ev):
        for s in self.sinks:
            try:
                s.write(ev)
            except (OSError, TypeError, ValueError):
                # a broken sink never aborts a plan
                log.exception("sink %s failed", type(s).__name__)
