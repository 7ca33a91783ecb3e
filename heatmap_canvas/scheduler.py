"""Background redraws for interactive maps

Map pan / zoom events arrive in bursts. ``DrawScheduler`` debounces them,
tags each draw with a generation number, renders into a private buffer off
the calling thread, and only swaps a finished buffer in if nothing newer
has been displayed. A superseded draw is cancelled.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from .config import DEBOUNCE, DEFAULT_INTENSITY, INTERACTION_DEBOUNCE
from .errors import DrawCancelled
from .raster import RasterBuffer


logger = logging.getLogger(__name__)


class DrawScheduler:
    """Serializes draws of a ``HeatmapRenderer``.

    Parameters
    ----------
    renderer : HeatmapRenderer
        Renderer to draw with; its buffer size is used for private buffers.
    on_ready : callable
        Called as ``on_ready(buffer, generation)`` each time a newer buffer
        is displayed. Runs on the worker thread, in generation order.
    executor : concurrent.futures.Executor
        Executor to run draws on. A single-worker pool is created (and shut
        down by ``close``) if not given.
    debounce : float
        Delay in seconds before a requested draw starts.
    interaction_debounce : float
        Delay used for requests made while the user is still interacting.
    """

    def __init__(
            self, renderer, on_ready=None, executor=None,
            debounce=DEBOUNCE, interaction_debounce=INTERACTION_DEBOUNCE):

        self.renderer = renderer
        self.on_ready = on_ready
        self.debounce = debounce
        self.interaction_debounce = interaction_debounce

        self.__owns_executor = executor is None
        self.executor = executor if executor is not None else (
            ThreadPoolExecutor(max_workers=1, thread_name_prefix="heatmap"))

        self.__lock = threading.RLock()
        self.__generation = 0
        self.__displayed_generation = 0
        self.__timer = None
        self.__cancel = None

        self.displayed = None

    @property
    def generation(self):
        """Generation of the most recent request."""
        return self.__generation

    @property
    def displayed_generation(self):
        return self.__displayed_generation

    def __supersede(self):
        """Cancel whatever is pending or running; must hold the lock."""
        if self.__timer is not None:
            self.__timer.cancel()
            self.__timer = None
        if self.__cancel is not None:
            self.__cancel.set()

        self.__generation += 1
        self.__cancel = threading.Event()
        return self.__generation, self.__cancel

    def request(
            self, points, ramp, intensity=DEFAULT_INTENSITY,
            interacting=False):
        """Schedule a debounced draw.

        Returns
        -------
        int
            Generation number of this request.
        """
        delay = self.interaction_debounce if interacting else self.debounce

        with self.__lock:
            generation, cancel = self.__supersede()
            timer = threading.Timer(
                delay, self.__start,
                args=(generation, cancel, points, ramp, intensity))
            timer.daemon = True
            self.__timer = timer

        timer.start()
        return generation

    def submit(self, points, ramp, intensity=DEFAULT_INTENSITY):
        """Start a draw now, superseding any earlier one.

        Returns
        -------
        concurrent.futures.Future
            Resolves to the generation number if the result was displayed,
            or None if it was superseded. Holds the exception if the draw
            failed.
        """
        with self.__lock:
            generation, cancel = self.__supersede()
            return self.executor.submit(
                self.__run, generation, cancel, points, ramp, intensity)

    def __start(self, generation, cancel, points, ramp, intensity):
        with self.__lock:
            if cancel.is_set() or generation != self.__generation:
                return
            self.__timer = None
            self.executor.submit(
                self.__run, generation, cancel, points, ramp, intensity)

    def __run(self, generation, cancel, points, ramp, intensity):

        if cancel.is_set():
            logger.debug("Draw %d superseded before starting", generation)
            return None

        buffer = RasterBuffer.like(self.renderer.buffer)
        try:
            self.renderer.render(
                points, ramp, intensity, buffer=buffer, cancel=cancel)
        except DrawCancelled:
            logger.debug("Draw %d cancelled", generation)
            return None
        except Exception:
            logger.exception("Draw %d failed", generation)
            raise

        with self.__lock:
            if cancel.is_set() or generation <= self.__displayed_generation:
                logger.debug("Dropping stale draw %d", generation)
                return None

            self.displayed = buffer
            self.__displayed_generation = generation

            if self.on_ready is not None:
                self.on_ready(buffer, generation)

        return generation

    def cancel(self):
        """Drop the pending request and stop the running draw."""
        with self.__lock:
            if self.__timer is not None:
                self.__timer.cancel()
                self.__timer = None
            if self.__cancel is not None:
                self.__cancel.set()

    def close(self):
        self.cancel()
        if self.__owns_executor:
            self.executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
