"""
Slab Executors

The stepper hands an executor a slab function and the interior k-range.
The executor decides how to split the range and where each slab runs:

- SequentialExecutor: one slab, on the calling thread
- ThreadedExecutor: one slab per worker on a thread pool

Slabs write disjoint parts of the next buffer and only read the pre-step
buffer, so no locking is needed. run() returns only after every slab has
finished; a slab exception propagates to the caller.
"""

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor

from .stepper import split_range

logger = logging.getLogger(__name__)


class SequentialExecutor:
    """Run the whole interior as one slab on the calling thread."""

    name = "sequential"

    def run(self, fn, start, stop):
        for k0, k1 in split_range(start, stop, 1):
            fn(k0, k1)

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class ThreadedExecutor:
    """Split the interior into contiguous slabs and map them on a thread pool.

    numpy releases the GIL inside array arithmetic, so slabs overlap in
    practice. The pool is started on first use and shut down by close().
    """

    name = "threaded"

    def __init__(self, max_workers=None):
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self.max_workers = max_workers or min(8, os.cpu_count() or 1)
        self._pool = None
        self._lock = threading.Lock()

    def _get_pool(self):
        with self._lock:
            if self._pool is None:
                logger.debug("Starting slab pool with %d workers", self.max_workers)
                self._pool = ThreadPoolExecutor(
                    max_workers=self.max_workers,
                    thread_name_prefix="density-field",
                )
            return self._pool

    def run(self, fn, start, stop):
        slabs = split_range(start, stop, self.max_workers)
        if len(slabs) <= 1:
            for k0, k1 in slabs:
                fn(k0, k1)
            return
        pool = self._get_pool()
        futures = [pool.submit(fn, k0, k1) for k0, k1 in slabs]
        # Wait for every slab before surfacing the first failure
        errors = [f.exception() for f in futures]
        for err in errors:
            if err is not None:
                raise err

    def close(self):
        with self._lock:
            if self._pool is not None:
                self._pool.shutdown(wait=True)
                self._pool = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


EXECUTORS = {
    "sequential": SequentialExecutor,
    "threaded": ThreadedExecutor,
}


def get_executor(executor=None):
    """Resolve an executor instance from None, a registry name or an instance."""
    if executor is None:
        return SequentialExecutor()
    if isinstance(executor, str):
        cls = EXECUTORS.get(executor)
        if cls is None:
            raise ValueError(f"Unknown executor: {executor!r}. "
                             f"Choose from {sorted(EXECUTORS)}")
        return cls()
    return executor
