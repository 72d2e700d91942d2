"""
Copyright (c) 2025 Eric C. Mumford (@heymumford)
This file is part of IMPORTORDER, licensed under the MIT License.
See LICENSE file for details.
"""

"""
Parallel processing and work queue module.

This module runs a worker function over many independent inputs on a bounded
thread or process pool. Every input becomes a WorkItem that records its own
result or error, so a failing input never aborts the others; results are
collected, not short-circuited.
"""

import logging
import time
import uuid
from collections.abc import Callable
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

logger = logging.getLogger("importorder.work_queue")

# Type variables for generic functions
T = TypeVar("T")  # Input type
R = TypeVar("R")  # Result type


class WorkerType(str, Enum):
    """Type of worker to use for processing tasks."""

    THREAD = "thread"  # Use ThreadPoolExecutor (shares the formatter, cheap to start)
    PROCESS = "process"  # Use ProcessPoolExecutor (inputs and worker must be picklable)


class WorkStatus(str, Enum):
    """Status of a work item in the queue."""

    PENDING = "pending"  # Work is queued but not yet submitted
    RUNNING = "running"  # Work has been submitted to the pool
    COMPLETED = "completed"  # Work has been completed successfully
    FAILED = "failed"  # Work has failed with an exception


@dataclass
class WorkItem(Generic[T, R]):
    """
    Represents a unit of work to be processed.

    Attributes:
        id: Unique identifier for the work item
        input_data: Input data for the work function
        status: Current status of the work item
        result: Result of the work function (if completed)
        error: Exception that occurred (if failed)
        started_at: Timestamp when the item was submitted to the pool
        completed_at: Timestamp when processing completed
        metadata: Additional metadata for the work item
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    input_data: T = field(default=None)
    status: WorkStatus = WorkStatus.PENDING
    result: R | None = None
    error: Exception | None = None
    started_at: float | None = None
    completed_at: float | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def mark_running(self) -> None:
        """Mark this work item as running."""
        self.status = WorkStatus.RUNNING
        self.started_at = time.time()

    def mark_completed(self, result: R) -> None:
        """
        Mark this work item as completed.

        Args:
            result: The result of the work function
        """
        self.status = WorkStatus.COMPLETED
        self.result = result
        self.completed_at = time.time()

    def mark_failed(self, error: Exception) -> None:
        """
        Mark this work item as failed.

        Args:
            error: The exception that caused the failure
        """
        self.status = WorkStatus.FAILED
        self.error = error
        self.completed_at = time.time()

    @property
    def processing_time(self) -> float | None:
        """Processing time in seconds or None if not started or completed."""
        if self.started_at and self.completed_at:
            return self.completed_at - self.started_at
        return None


class WorkQueue(Generic[T, R]):
    """
    Work queue for parallel processing of independent inputs.

    Items are added with add_work/add_batch and processed by run(), which blocks
    until every pending item has completed or failed.
    """

    def __init__(
        self,
        worker_function: Callable[[T], R],
        worker_type: WorkerType = WorkerType.THREAD,
        max_workers: int = 5,
        on_complete: Callable[[WorkItem[T, R]], None] | None = None,
        on_error: Callable[[WorkItem[T, R]], None] | None = None,
    ):
        """
        Initialize the work queue.

        Args:
            worker_function: Function to process each input
            worker_type: Type of worker to use for processing tasks
            max_workers: Maximum number of concurrent workers
            on_complete: Callback function called when a work item completes
            on_error: Callback function called when a work item fails
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")

        self.worker_function = worker_function
        self.worker_type = worker_type
        self.max_workers = max_workers
        self.on_complete = on_complete
        self.on_error = on_error

        self.work_items: dict[str, WorkItem[T, R]] = {}
        self.queue: list[str] = []

    def add_work(self, input_data: T, metadata: dict[str, Any] | None = None) -> str:
        """
        Add a work item to the queue.

        Args:
            input_data: Input data for the work function
            metadata: Additional metadata for the work item

        Returns:
            ID of the created work item
        """
        work_item = WorkItem[T, R](input_data=input_data, metadata=metadata or {})
        self.work_items[work_item.id] = work_item
        self.queue.append(work_item.id)
        return work_item.id

    def add_batch(self, batch_items: list[T], metadata: dict[str, Any] | None = None) -> list[str]:
        """
        Add a batch of work items to the queue.

        Args:
            batch_items: List of input data items
            metadata: Base metadata for all items (copied per item)

        Returns:
            List of work item IDs
        """
        work_ids = [self.add_work(input_data, dict(metadata or {})) for input_data in batch_items]
        logger.debug(f"Added batch of {len(work_ids)} work items to queue")
        return work_ids

    def _create_executor(self) -> Executor:
        if self.worker_type == WorkerType.PROCESS:
            return ProcessPoolExecutor(max_workers=self.max_workers)
        return ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="importorder")

    def run(self) -> list[WorkItem[T, R]]:
        """
        Process every pending work item.

        Returns:
            The processed work items in the order they were added
        """
        pending_ids, self.queue = self.queue, []
        if not pending_ids:
            return []

        logger.debug(
            f"Processing {len(pending_ids)} work items with {self.max_workers} "
            f"{self.worker_type.value} workers",
        )

        with self._create_executor() as executor:
            futures: dict[Future, str] = {}
            for work_id in pending_ids:
                work_item = self.work_items[work_id]
                work_item.mark_running()
                futures[executor.submit(self.worker_function, work_item.input_data)] = work_id

            for future in as_completed(futures):
                self._handle_completed_future(self.work_items[futures[future]], future)

        return [self.work_items[work_id] for work_id in pending_ids]

    def _handle_completed_future(self, work_item: WorkItem[T, R], future: Future) -> None:
        error = future.exception()
        if error is None:
            work_item.mark_completed(future.result())
            callback = self.on_complete
        else:
            work_item.mark_failed(error)
            logger.debug(f"Work item {work_item.id} failed: {error}")
            callback = self.on_error

        if callback:
            try:
                callback(work_item)
            except Exception as e:
                logger.error(f"Error in work item callback: {str(e)}", exc_info=True)

    def get_stats(self) -> dict[str, Any]:
        """
        Get statistics about the work queue.

        Returns:
            Dictionary with queue statistics
        """
        counts = {status: 0 for status in WorkStatus}
        for item in self.work_items.values():
            counts[item.status] += 1

        processing_times = [
            item.processing_time
            for item in self.work_items.values()
            if item.processing_time is not None
        ]
        finished = counts[WorkStatus.COMPLETED] + counts[WorkStatus.FAILED]

        return {
            "worker_type": self.worker_type.value,
            "max_workers": self.max_workers,
            "queue_size": len(self.queue),
            "pending_count": counts[WorkStatus.PENDING],
            "completed_count": counts[WorkStatus.COMPLETED],
            "failed_count": counts[WorkStatus.FAILED],
            "total_count": len(self.work_items),
            "avg_processing_time": (
                sum(processing_times) / len(processing_times) if processing_times else 0
            ),
            "success_rate": counts[WorkStatus.COMPLETED] / finished if finished else 0,
        }


def run_in_pool(
    func: Callable[[T], R],
    items: list[T],
    max_workers: int = 5,
    worker_type: WorkerType = WorkerType.THREAD,
    on_complete: Callable[[WorkItem[T, R]], None] | None = None,
    on_error: Callable[[WorkItem[T, R]], None] | None = None,
) -> list[WorkItem[T, R]]:
    """
    Run a function on multiple items in a worker pool.

    Args:
        func: Function to apply to each item
        items: List of items to process
        max_workers: Maximum number of concurrent workers
        worker_type: Thread or process workers
        on_complete: Optional callback for completed items
        on_error: Optional callback for failed items

    Returns:
        Work items in the same order as items, each completed or failed
    """
    queue = WorkQueue[T, R](
        worker_function=func,
        worker_type=worker_type,
        max_workers=max_workers,
        on_complete=on_complete,
        on_error=on_error,
    )
    queue.add_batch(items)
    work_items = queue.run()
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Pool finished: {queue.get_stats()}")
    return work_items
