"""
Background export of high-resolution Julia set renders.

The ExportWorker runs one dedicated thread that takes render jobs from
a request queue, renders and saves them one at a time, and posts the
elapsed time on a result queue. The UI thread never waits on it except
at shutdown.

Usage:
    worker = ExportWorker()
    worker.submit_job("julia.png", options.for_export(8, 512), color)

    # In your game loop:
    result = worker.poll_result()
    if result is not None:
        print(f"export took {result.elapsed_ms:.2f}ms")

    # On exit (waits for queued jobs to finish writing):
    worker.shutdown()
"""

import queue
import threading
import time
import weakref
from dataclasses import dataclass
from typing import Optional, Tuple

import pygame

from .colormaps import normalize_color
from .options import RenderOptions
from .renderer import render_julia, save_image


@dataclass(frozen=True)
class RenderJob:
    """One export request: where to save, what to render, in which color."""

    path: str
    options: RenderOptions
    color: Tuple[int, int, int]


@dataclass(frozen=True)
class JobResult:
    """Outcome of one RenderJob, sent back once per job."""

    path: str
    elapsed_ms: float
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# Sentinel telling the worker thread to exit after draining the queue
_STOP = object()

# Seconds between checks for a finished main thread while idle
_POLL_INTERVAL = 0.1


def execute_job(job, saver=save_image):
    """
    Render and save a single job, timing both.

    Save failures are caught and reported in the result.

    Returns:
        JobResult for job
    """
    start_time = time.perf_counter()
    error = None
    try:
        image = render_julia(job.options, job.color)
        saver(image, job.path)
    except (OSError, pygame.error) as e:
        error = str(e) or type(e).__name__
    except Exception as e:
        # One bad job must not take down the jobs queued behind it
        error = f"{type(e).__name__}: {e}"
    if error is not None:
        print(f"Error exporting render to {job.path}: {error}")
    elapsed_ms = (time.perf_counter() - start_time) * 1000.0
    return JobResult(job.path, elapsed_ms, error)


def _export_loop(jobs, results, saver):
    """
    Background thread: render queued jobs until the stop sentinel.

    Also exits once the main thread has finished and the queue is empty,
    so a controller that never called shutdown() cannot hang the
    interpreter at exit. Jobs already queued are still written.
    """
    while True:
        try:
            job = jobs.get(timeout=_POLL_INTERVAL)
        except queue.Empty:
            if not threading.main_thread().is_alive():
                break
            continue
        if job is _STOP:
            break
        results.put(execute_job(job, saver))


class ExportWorker:
    """
    Runs export renders on a single background thread.

    Jobs execute strictly one at a time, in submission order. A job that
    fails to save is reported in its JobResult and the worker moves on.
    If the worker object is garbage-collected, or the main thread ends,
    without shutdown(), the thread still exits once the queued jobs are
    done.

    Attributes:
        pending: Number of submitted jobs whose result has not been collected
    """

    def __init__(self, saver=save_image):
        """
        Start the worker thread.

        Args:
            saver: Callable(image, path) that writes a rendered image
        """
        self._jobs = queue.Queue()
        self._results = queue.Queue()
        self._pending = 0
        self._stopped = False
        # Not a daemon: shutdown must never cut a file write short
        self._thread = threading.Thread(
            target=_export_loop,
            args=(self._jobs, self._results, saver),
            name="julia-export",
        )
        self._thread.start()
        self._finalizer = weakref.finalize(self, self._jobs.put, _STOP)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()

    @property
    def pending(self):
        return self._pending

    @property
    def alive(self):
        return self._thread.is_alive()

    def submit_job(self, path, options, color):
        """
        Queue a render to be saved at path. Never blocks.

        Raises:
            InvalidRenderOptions if options or color are unusable
            RuntimeError if the worker has been shut down
        """
        if self._stopped:
            raise RuntimeError("export worker has been shut down")
        options.validate()
        color = tuple(int(c) for c in normalize_color(color))
        self._jobs.put(RenderJob(str(path), options, color))
        self._pending += 1

    def poll_result(self):
        """Get the next finished JobResult, or None if none is ready."""
        try:
            result = self._results.get_nowait()
        except queue.Empty:
            return None
        self._pending -= 1
        return result

    def wait_result(self, timeout=None):
        """
        Block until the next JobResult is available.

        Returns:
            The JobResult, or None if timeout elapsed first
        """
        try:
            result = self._results.get(timeout=timeout)
        except queue.Empty:
            return None
        self._pending -= 1
        return result

    def shutdown(self):
        """
        Stop the worker after it finishes every queued job.

        Results of those jobs can still be collected afterwards.
        Safe to call more than once.
        """
        if not self._stopped:
            self._stopped = True
            self._finalizer()
        self._thread.join()
