"""Re-run the test command whenever a watched source file changes."""

from __future__ import annotations

import logging
import os
import re
import subprocess
import sys
import threading
import time
from pathlib import Path
from typing import Callable

import typer
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

# Events for the same file inside this window are discarded.
DISCARD_SECONDS = 1.0
RERUN_SECONDS = 2.0


def default_command(extra_args: list[str] | None = None) -> list[str]:
    return [sys.executable, "-m", "prettytest", "run", *(extra_args or [])]


class DebounceCache:
    """Last trigger time per filename, shared between the observer and timer threads."""

    def __init__(
        self,
        discard_seconds: float = DISCARD_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.discard_seconds = discard_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._events: dict[str, float] = {}

    def should_run(self, filename: str) -> bool:
        now = self._clock()
        with self._lock:
            last = self._events.get(filename)
            if last is not None and now - last <= self.discard_seconds:
                return False
            self._events[filename] = now
            return True


class RerunHandler(FileSystemEventHandler):
    def __init__(self, watcher: Watcher) -> None:
        self._watcher = watcher

    def on_modified(self, event: FileSystemEvent) -> None:
        self._watcher.handle_event(event)

    def on_created(self, event: FileSystemEvent) -> None:
        self._watcher.handle_event(event)


class Watcher:
    """Watch folders and shell out to the test command on changes.

    The first Ctrl-C schedules a one-shot rerun after ``rerun_seconds``; a
    second Ctrl-C inside that window terminates the watcher.
    """

    def __init__(
        self,
        paths: list[Path],
        command: list[str] | None = None,
        pattern: str = r"\.py$",
        discard_seconds: float = DISCARD_SECONDS,
        rerun_seconds: float = RERUN_SECONDS,
        logger: logging.Logger | None = None,
    ) -> None:
        self.paths = [Path(p).resolve() for p in paths]
        self.command = command or default_command()
        self.pattern = re.compile(pattern)
        self.rerun_seconds = rerun_seconds
        self.cache = DebounceCache(discard_seconds)
        self.logger = logger or logging.getLogger("prettytest")

        self._run_lock = threading.Lock()
        self._stop = threading.Event()
        self._paused = threading.Event()
        self._interrupts = 0
        self._timer: threading.Timer | None = None

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    @property
    def terminated(self) -> bool:
        return self._stop.is_set()

    def pause(self) -> None:
        self._paused.set()

    def resume(self) -> None:
        self._paused.clear()

    def terminate(self) -> None:
        self._stop.set()
        if self._timer is not None:
            self._timer.cancel()

    def run_tests(self) -> int:
        """Run the test command once and echo its output. Returns the exit code.

        File events are ignored while the command runs.
        """
        with self._run_lock:
            was_paused = self.paused
            self.pause()
            try:
                return self._run_command()
            finally:
                if not was_paused:
                    self.resume()

    def _run_command(self) -> int:
        self.logger.debug(f"Running {' '.join(self.command)}")
        proc = subprocess.run(
            self.command,
            capture_output=True,
            text=True,
        )
        typer.echo(proc.stdout, nl=False)
        if proc.stderr:
            typer.echo(proc.stderr, err=True, nl=False)
        if proc.returncode != 0:
            self.logger.debug(f"Test command exited with {proc.returncode}")
        return proc.returncode

    def _is_hidden(self, path: Path) -> bool:
        for root in self.paths:
            try:
                rel = path.relative_to(root)
            except ValueError:
                continue
            return any(part.startswith(".") for part in rel.parts)
        return False

    def handle_event(self, event: FileSystemEvent) -> bool:
        """Run the tests for a matching, non-debounced event. Returns whether they ran."""
        if event.is_directory or self.paused or self.terminated:
            return False
        filename = os.fsdecode(event.src_path)
        if self._is_hidden(Path(filename)) or not self.pattern.search(filename):
            return False

        self.logger.debug(f"Event {event.event_type} occurred for file {filename}")
        if not self.cache.should_run(filename):
            self.logger.debug(f"Event {event.event_type} was discarded for file {filename}")
            return False

        typer.echo("Run the tests")
        self.run_tests()
        return True

    def interrupt(self) -> bool:
        """Handle Ctrl-C. Returns True when the watcher is terminating."""
        if self._interrupts > 0:
            self.terminate()
            return True
        self._interrupts += 1
        typer.echo(
            f"Hit CTRL-C again to exit, otherwise tests will run again in "
            f"{self.rerun_seconds:g}s."
        )
        self._timer = threading.Timer(self.rerun_seconds, self._delayed_rerun)
        self._timer.daemon = True
        self._timer.start()
        return False

    def _delayed_rerun(self) -> None:
        if self.terminated:
            return
        self.run_tests()
        self._interrupts = 0

    def run(self) -> None:
        """Run the tests once, then block watching until terminated."""
        self.run_tests()

        observer = Observer()
        handler = RerunHandler(self)
        for path in self.paths:
            observer.schedule(handler, str(path), recursive=True)
            typer.echo(f"Start watching path {path}")
        observer.start()

        try:
            while not self.terminated:
                try:
                    self._stop.wait(0.2)
                except KeyboardInterrupt:
                    self.interrupt()
        finally:
            self.terminate()
            observer.stop()
            observer.join()
