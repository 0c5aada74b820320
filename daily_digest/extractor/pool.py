"""Fixed-size worker pool with a shared task cursor."""

import threading
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar, cast


T = TypeVar("T")


def run_with_concurrency(
    tasks: Sequence[Callable[[], T]],
    concurrency: int,
) -> list[T]:
    """Run zero-argument tasks on at most ``concurrency`` threads.

    ``min(concurrency, len(tasks))`` workers each take the next pending
    index from a shared, lock-guarded cursor until none remain, so no task
    runs twice and no more than ``concurrency`` tasks run at once. Results
    are stored at each task's original index.

    Args:
        tasks: Callables to run.
        concurrency: Maximum number of tasks in flight.

    Returns:
        Task results in task order.

    Raises:
        Exception: The first exception raised by a task, after all workers
            have stopped.
    """
    if not tasks:
        return []

    results: list[T | None] = [None] * len(tasks)
    cursor = 0
    cursor_lock = threading.Lock()

    def next_index() -> int | None:
        nonlocal cursor
        with cursor_lock:
            if cursor >= len(tasks):
                return None
            index = cursor
            cursor += 1
            return index

    def worker() -> None:
        while (index := next_index()) is not None:
            results[index] = tasks[index]()

    worker_count = max(1, min(concurrency, len(tasks)))
    with ThreadPoolExecutor(
        max_workers=worker_count, thread_name_prefix="extract"
    ) as executor:
        futures = [executor.submit(worker) for _ in range(worker_count)]
    for future in futures:
        future.result()

    return cast("list[T]", results)
