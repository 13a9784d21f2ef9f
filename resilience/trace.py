"""Hierarchical timing traces that can be written out as JSON.

Traces are pushed onto a :class:`TraceStack`. A trace pushed while another
is open becomes its child. Ending a trace through its :class:`TraceHandle`
pops it, and any finished ancestors with it.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import IO, Any

from .jsonvalue import check_value, serialize
from .timer import Timer

__all__ = [
    "TraceBase",
    "TraceStack",
    "TraceShell",
    "Trace",
    "TraceHandle",
    "TimingTrace",
    "IterTimingTrace",
    "begin_trace",
]


def _clock_string(timestamp: float) -> str:
    return time.strftime("%H:%M:%S", time.localtime(timestamp))


class TraceBase(ABC):
    """A node in a trace tree."""

    def __init__(self, stack: TraceStack | None = None) -> None:
        self.trace_stack = stack
        self.parent: TraceBase | None = None
        self.children: list[TraceBase] = []
        self._done = False

    @property
    def done(self) -> bool:
        return self._done

    def mark_done(self) -> None:
        self._done = True

    def add_child(self, child: TraceBase) -> TraceBase:
        """Attach ``child`` below this trace and return it."""
        self.children.append(child)
        child.parent = self
        return child

    @property
    @abstractmethod
    def typestring(self) -> str:
        """Name of the kind of trace, written as the ``type`` field."""

    def to_json(self) -> dict[str, Any]:
        return {
            "type": self.typestring,
            "subtraces": [child.to_json() for child in self.children],
        }

    @abstractmethod
    def end(self) -> None:
        """Record that the traced work has finished."""


class TraceStack:
    """The forest of recorded traces and the currently open one."""

    def __init__(self) -> None:
        self.traces: list[TraceBase] = []
        self.current: TraceBase | None = None

    def push(self, trace: TraceBase) -> None:
        if self.current is not None:
            self.current = self.current.add_child(trace)
        else:
            self.traces.append(trace)
            self.current = trace

    def try_pop(self, trace: TraceBase | None) -> None:
        """Close ``trace`` if it is current, then close finished ancestors."""
        if trace is None:
            return
        if trace is self.current:
            trace.end()
            self.current = trace.parent
        while self.current is not None and self.current.done:
            self.current.end()
            self.current = self.current.parent

    def to_json(self) -> dict[str, Any]:
        return {"traces": [trace.to_json() for trace in self.traces]}

    def write(self, stream: IO[str]) -> IO[str]:
        """Write all traces to ``stream`` as indented JSON."""
        stream.write(serialize(self.to_json(), True))
        return stream


class TraceShell(TraceBase):
    """Stand-in returned when tracing is disabled; it records nothing."""

    @property
    def typestring(self) -> str:
        return "unknown"

    def end(self) -> None:
        pass

    def __enter__(self) -> TraceShell:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.end()


class Trace(TraceBase):
    """A named trace with wall-clock start and end times."""

    def __init__(self, stack: TraceStack | None, trace_id: Any) -> None:
        super().__init__(stack)
        self.id = check_value(trace_id)
        self._start_time = time.time()
        self._end_time = 0.0

    def to_json(self) -> dict[str, Any]:
        obj = super().to_json()
        obj["name"] = self.id
        obj["start_timestamp"] = _clock_string(self._start_time)
        obj["end_timestamp"] = _clock_string(self._end_time)
        return obj

    def end(self) -> None:
        self._end_time = time.time()


class TraceHandle:
    """Ends a pushed trace once, either explicitly or on leaving a ``with``."""

    def __init__(self, trace: Trace | None) -> None:
        self._trace = trace

    def end(self) -> None:
        trace = self._trace
        if trace is None:
            return
        self._trace = None
        trace.mark_done()
        if trace.trace_stack is not None:
            trace.trace_stack.try_pop(trace)

    def __enter__(self) -> TraceHandle:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.end()


class TimingTrace(Trace):
    """A trace that also measures its duration in seconds."""

    def __init__(self, stack: TraceStack | None, trace_id: Any) -> None:
        super().__init__(stack, trace_id)
        self._timer = Timer(True)
        self.duration = 0.0

    @property
    def typestring(self) -> str:
        return "timing"

    def end(self) -> None:
        self.duration = self._timer.time()
        super().end()

    def to_json(self) -> dict[str, Any]:
        obj = super().to_json()
        obj["time"] = self.duration
        return obj


class IterTimingTrace(TimingTrace):
    """A timing trace tagged with an iteration number."""

    def __init__(self, stack: TraceStack | None, trace_id: Any, iteration: int) -> None:
        super().__init__(stack, trace_id)
        self.iteration = iteration

    def to_json(self) -> dict[str, Any]:
        obj = super().to_json()
        obj["iteration"] = self.iteration
        return obj


def begin_trace(stack: TraceStack, trace_type: type, *args: Any, enabled: bool = True) -> TraceHandle | TraceShell:
    """Create a trace of ``trace_type``, push it and return a handle to end it.

    With ``enabled`` false nothing is recorded and a :class:`TraceShell`
    is returned instead.
    """
    if not enabled:
        return TraceShell()
    trace = trace_type(stack, *args)
    handle = TraceHandle(trace)
    stack.push(trace)
    return handle