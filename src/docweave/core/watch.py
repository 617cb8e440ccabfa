"""Polling watch loop that recompiles documents whenever their sources change.

Every cycle reads the modification time of each watched file, recompiles the
files whose timestamp moved forward, then sleeps on a :class:`threading.Event`
so that a caller (or ``stop()``) can interrupt the pause immediately.

Baselines are advanced as soon as a file has been inspected, before its
compile runs. A compile that raises is therefore not retried until the file is
modified again.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
import logging
import os
from pathlib import Path
import threading
import time
from typing import Any, Literal

from .diagnostics import DiagnosticEmitter, ensure_emitter
from .exceptions import WatchConfigurationError, WatchTargetError


logger = logging.getLogger(__name__)

CompileAction = Callable[..., Any]
MtimeReader = Callable[[Path], int | float]
MissingPolicy = Literal["fail", "skip"]

DEFAULT_INTERVAL = 1.0
_MISSING_POLICIES = ("fail", "skip")
_STOP_CHECK = 0.05


def stat_mtime(path: Path) -> int:
    """Return the modification time of ``path`` in nanoseconds."""
    return path.stat().st_mtime_ns


def _normalise_targets(targets: str | os.PathLike[str] | Iterable[Any]) -> tuple[Path, ...]:
    if isinstance(targets, (str, os.PathLike)):
        return (Path(targets),)
    return tuple(dict.fromkeys(Path(target) for target in targets))


class WatchLoop:
    """Watch a fixed list of files and recompile each one when it changes."""

    def __init__(
        self,
        targets: str | os.PathLike[str] | Iterable[Any],
        compile: CompileAction,
        *,
        interval: float = DEFAULT_INTERVAL,
        args: Sequence[Any] = (),
        kwargs: Mapping[str, Any] | None = None,
        missing: MissingPolicy = "fail",
        mtime: MtimeReader | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        resolved = _normalise_targets(targets)
        if not resolved:
            raise WatchConfigurationError("At least one file must be watched.")
        if interval < 0:
            raise WatchConfigurationError(f"Watch interval must not be negative (got {interval}).")
        if missing not in _MISSING_POLICIES:
            raise WatchConfigurationError(
                f"Unknown missing-file policy '{missing}' (expected 'fail' or 'skip')."
            )
        if not callable(compile):
            raise WatchConfigurationError("The compile action must be callable.")

        self.targets = resolved
        self.interval = float(interval)
        self.missing = missing
        self._compile = compile
        self._args = tuple(args)
        self._kwargs = dict(kwargs or {})
        self._mtime = mtime or stat_mtime
        self._emitter = ensure_emitter(emitter)
        self._baseline: dict[Path, int | float] = {}
        self._initialised = False
        self._stop = threading.Event()

    @property
    def baseline(self) -> dict[Path, int | float]:
        """Return a snapshot of the recorded modification times."""
        return dict(self._baseline)

    def initialise(self) -> None:
        """Compile every target once and record its modification time."""
        for path in self.targets:
            self._emitter.event("watch_compile", {"path": str(path), "reason": "initial"})
            self._invoke(path)
            try:
                self._baseline[path] = self._mtime(path)
            except OSError as exc:
                raise WatchTargetError(str(path), exc.strerror or str(exc)) from exc
        self._initialised = True

    def poll(self) -> list[Path]:
        """Run a single watch cycle (without the pause) and return changed paths."""
        if not self._initialised:
            raise RuntimeError("initialise() must run before the first poll.")

        changed: list[Path] = []
        for path, stamp in self._scan():
            if stamp is None:
                continue
            previous = self._baseline.get(path)
            if previous is None or stamp > previous:
                changed.append(path)
            self._baseline[path] = stamp

        for path in changed:
            self._emitter.event("watch_compile", {"path": str(path), "reason": "changed"})
            self._invoke(path)
        return changed

    def run(self, cancel: threading.Event | None = None) -> int:
        """Compile all targets then poll until cancelled; return the cycle count."""
        self._stop.clear()
        token = cancel if cancel is not None else self._stop
        self._emitter.event(
            "watch_start",
            {"targets": [str(path) for path in self.targets], "interval": self.interval},
        )
        cycles = 0
        try:
            if not self._initialised:
                self.initialise()
            while not self._stopped(token):
                self.poll()
                cycles += 1
                if self._pause(token):
                    break
        finally:
            self._emitter.event("watch_stop", {"cycles": cycles})
        return cycles

    def stop(self) -> None:
        """Request the running loop to stop at its next pause."""
        self._stop.set()

    def _stopped(self, token: threading.Event) -> bool:
        return token.is_set() or self._stop.is_set()

    def _pause(self, token: threading.Event) -> bool:
        if token is self._stop:
            return self._stop.wait(self.interval)
        # A caller token ends the pause at once; stop() is noticed between slices.
        deadline = time.monotonic() + self.interval
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return self._stopped(token)
            if token.wait(min(remaining, _STOP_CHECK)) or self._stop.is_set():
                return True

    def _scan(self) -> list[tuple[Path, int | float | None]]:
        observed: list[tuple[Path, int | float | None]] = []
        for path in self.targets:
            try:
                observed.append((path, self._mtime(path)))
            except OSError as exc:
                reason = exc.strerror or str(exc)
                if self.missing == "fail":
                    raise WatchTargetError(str(path), reason) from exc
                logger.debug("Watched path %s is unavailable: %s", path, reason)
                self._emitter.warning(f"Cannot read '{path}', skipping it this cycle: {reason}")
                self._emitter.event("watch_missing", {"path": str(path), "reason": reason})
                observed.append((path, None))
        return observed

    def _invoke(self, path: Path) -> None:
        self._compile(path, *self._args, **self._kwargs)


def watch(
    targets: str | os.PathLike[str] | Iterable[Any],
    compile: CompileAction | None = None,
    *args: Any,
    interval: float = DEFAULT_INTERVAL,
    cancel: threading.Event | None = None,
    missing: MissingPolicy = "fail",
    emitter: DiagnosticEmitter | None = None,
    **kwargs: Any,
) -> int:
    """Watch ``targets`` and call ``compile(path, *args, **kwargs)`` on changes.

    Every target is compiled once up front. The function then blocks until
    ``cancel`` is set, ``KeyboardInterrupt`` is raised, or a compile fails.
    Without an explicit ``compile`` action, files are built according to their
    extension by :func:`docweave.api.compile_document`.
    """
    if compile is None:
        from docweave.api.conversion import compile_document

        compile = compile_document

    loop = WatchLoop(
        targets,
        compile,
        interval=interval,
        args=args,
        kwargs=kwargs,
        missing=missing,
        emitter=emitter,
    )
    return loop.run(cancel)


__all__ = [
    "DEFAULT_INTERVAL",
    "CompileAction",
    "MissingPolicy",
    "MtimeReader",
    "WatchLoop",
    "stat_mtime",
    "watch",
]
