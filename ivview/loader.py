"""Background image loading with cooperative cancellation.

Workers never touch viewer state. They post events into a locked deque
which the main loop drains once per frame.
"""

from __future__ import annotations
import os
from collections import deque
from queue import Empty, PriorityQueue
from threading import Event, Lock, Thread
from typing import Callable, Deque, List, Optional

from .config import ASYNC_WORKERS
from .events import ImageLoaded, ImageMetaReady, LoadFailed, LoaderEvent
from .image_utils import LoadCancelled, MetadataProbeFailed, decode_image, probe_image
from .logging import debug, log, now
from .slotlist import StableKey
from .types import DecodedImage, ImageMeta, LoadKind, LoadPriority, LoadTask


class CancellationToken:
    """Marks one load as superseded. Checked, never preemptive."""

    __slots__ = ("_flag",)

    def __init__(self) -> None:
        self._flag = Event()

    def cancel(self) -> None:
        self._flag.set()

    @property
    def cancelled(self) -> bool:
        return self._flag.is_set()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled})"


class AsyncImageLoader:
    """Thread pool running probe and decode tasks."""

    def __init__(
        self,
        workers: int = ASYNC_WORKERS,
        probe_func: Callable[..., ImageMeta] = probe_image,
        decode_func: Callable[..., DecodedImage] = decode_image,
    ):
        self.task_queue: "PriorityQueue[LoadTask]" = PriorityQueue()
        self.probe_func = probe_func
        self.decode_func = decode_func
        self.running = True
        self.ui_events: Deque[LoaderEvent] = deque()
        self.ui_lock = Lock()
        self.workers: List[Thread] = []

        for i in range(max(1, workers)):
            worker = Thread(target=self._worker_loop, name=f"ivview-loader-{i}", daemon=True)
            worker.start()
            self.workers.append(worker)

    def _worker_loop(self) -> None:
        while self.running:
            try:
                task = self.task_queue.get(timeout=0.1)
            except Empty:
                continue
            try:
                self._run(task)
            except Exception as e:
                log(f"[LOADER][ERR] {task.kind.name.lower()} of {os.path.basename(task.path)}: {e!r}")
            finally:
                self.task_queue.task_done()

    def _run(self, task: LoadTask) -> None:
        name = os.path.basename(task.path)
        if task.token.cancelled:
            debug(f"[LOADER] Skipping cancelled {task.kind.name.lower()} of {name}")
            return

        event: Optional[LoaderEvent] = None
        if task.kind is LoadKind.PROBE:
            try:
                meta = self.probe_func(task.path, task.token)
                event = ImageMetaReady(task.key, meta, task.token)
            except LoadCancelled:
                debug(f"[LOADER] Probe of {name} cancelled")
                return
            except MetadataProbeFailed as e:
                # The decode is still pending and decides the outcome
                log(f"[LOADER][WARN] {e}")
                return
        else:
            try:
                img = self.decode_func(task.path, task.token)
                event = ImageLoaded(task.key, img, task.token)
            except LoadCancelled:
                debug(f"[LOADER] Decode of {name} cancelled")
                return
            except Exception as e:
                event = LoadFailed(task.key, e, task.token)

        if task.token.cancelled:
            debug(f"[LOADER] Dropping result for {name}, superseded")
            return
        self._push_ui_event(event)

    def _push_ui_event(self, event: LoaderEvent) -> None:
        with self.ui_lock:
            self.ui_events.append(event)

    def submit(self, key: StableKey, path: str, token: CancellationToken) -> None:
        """Queue a probe and a decode for ``path``; both run concurrently."""
        t = now()
        self.task_queue.put(LoadTask(LoadKind.PROBE, key, path, token, LoadPriority.META, t))
        self.task_queue.put(LoadTask(LoadKind.DECODE, key, path, token, LoadPriority.IMAGE, t))

    def poll_events(self, max_events: int = 100) -> List[LoaderEvent]:
        """Take up to ``max_events`` finished events, oldest first."""
        out: List[LoaderEvent] = []
        with self.ui_lock:
            while self.ui_events and len(out) < max_events:
                out.append(self.ui_events.popleft())
        return out

    def shutdown(self) -> None:
        self.running = False
        for worker in self.workers:
            worker.join(timeout=1.0)
