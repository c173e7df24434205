"""
Background scheduler for lifecycle jobs.

Jobs run on a worker pool so submission never blocks the caller. Every
job moves from PENDING to exactly one terminal status; that transition
happens once, under the scheduler lock, and queues exactly one
notification task. Notification tasks run one at a time on a dedicated
thread, in the order refresh -> track -> per-submission callback.
"""

import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

from codecommit_lifecycle.config import DEFAULT_MAX_WORKERS
from codecommit_lifecycle.exceptions import ConflictError, JobNotFoundError, failure_reason
from codecommit_lifecycle.jobs import LifecycleJob
from codecommit_lifecycle.logging import get_logger, log_job_transition, mask_sensitive_data
from codecommit_lifecycle.notifications import (
    EventTracker,
    LoggingEventTracker,
    NullRefreshNotifier,
    RefreshNotifier,
)
from codecommit_lifecycle.types.jobs import JobHandle, JobState, JobStatus, OperationKind

logger = get_logger("jobs")

JobCallback = Callable[[JobHandle, JobStatus], None]


@dataclass
class _JobRecord:
    handle: JobHandle
    job: LifecycleJob
    status: JobStatus
    callback: JobCallback | None = None
    future: Future | None = None
    # Set once the terminal status is recorded and its listeners have run.
    done: threading.Event = field(default_factory=threading.Event)


class JobScheduler:
    """
    Runs LifecycleJobs off the caller's thread.

    Example:
        ```python
        with JobScheduler(refresh_notifier=registry) as scheduler:
            handle = scheduler.submit(CreateRepositoryJob(client.repos, "demo"))
            scheduler.status(handle)  # JobStatus(state=<JobState.PENDING ...>)
            scheduler.wait(handle)
        ```

    Deletes are serialized per repository name: submitting a second
    DeleteRepositoryJob while one is pending or running raises
    ConflictError.
    """

    def __init__(
        self,
        refresh_notifier: RefreshNotifier | None = None,
        event_tracker: EventTracker | None = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        """
        Args:
            refresh_notifier: Called once per terminal job (default: no-op)
            event_tracker: Called once per terminal job, after the notifier
                (default: LoggingEventTracker)
            max_workers: Number of worker threads
        """
        self.refresh_notifier = refresh_notifier or NullRefreshNotifier()
        self.event_tracker = event_tracker or LoggingEventTracker()

        self._workers = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="lifecycle-job"
        )
        self._notifications = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="lifecycle-notify"
        )

        self._lock = threading.Lock()
        self._records: dict[str, _JobRecord] = {}
        self._active_deletes: set[str] = set()
        self._closed = False

    def submit(self, job: LifecycleJob, callback: JobCallback | None = None) -> JobHandle:
        """
        Queue a job and return immediately.

        Args:
            job: The job to run
            callback: Optional ``callback(handle, status)`` called after the
                notifier and tracker, on the notification thread

        Returns:
            Handle for status(), cancel() and wait()

        Raises:
            ConflictError: If a delete of the same repository is in flight
            RuntimeError: If the scheduler has been shut down
        """
        handle = JobHandle(job.operation, job.repository_name)
        record = _JobRecord(handle=handle, job=job, status=JobStatus.pending(), callback=callback)

        with self._lock:
            if self._closed:
                raise RuntimeError("JobScheduler has been shut down")

            if job.operation is OperationKind.DELETE:
                if job.repository_name in self._active_deletes:
                    raise ConflictError(job.repository_name)
                self._active_deletes.add(job.repository_name)

            self._records[handle.job_id] = record
            record.future = self._workers.submit(self._run, record)

        log_job_transition(handle, record.status)
        return handle

    def status(self, handle: JobHandle) -> JobStatus:
        """
        Raises:
            JobNotFoundError: If the handle is unknown
        """
        with self._lock:
            return self._get_record(handle).status

    def cancel(self, handle: JobHandle) -> bool:
        """
        Cancel a job.

        A pending job becomes CANCELED immediately and never runs. A running
        job is flagged; its in-flight call completes, the result is discarded
        and the job is marked CANCELED. Remote side effects are not rolled
        back.

        Returns:
            False if the job had already reached a terminal status

        Raises:
            JobNotFoundError: If the handle is unknown
        """
        with self._lock:
            record = self._get_record(handle)
            if record.status.is_terminal:
                return False

            record.job.cancel()

            if record.status.state is JobState.RUNNING:
                logger.info(
                    "Cancel requested for running %s of %s; result will be discarded",
                    handle.operation.value,
                    handle.repository_name,
                )
                return True

            if record.future is not None:
                record.future.cancel()
            outcome = JobStatus.canceled()
            self._complete_locked(record, outcome)

        self._dispatch(record, outcome)
        return True

    def wait(self, handle: JobHandle, timeout: float | None = None) -> JobStatus:
        """
        Block until the job is terminal and its listeners have run.

        Meant for scripts and tests; UI code should pass a callback to
        submit() instead.

        Raises:
            JobNotFoundError: If the handle is unknown
            TimeoutError: If the job is not done within ``timeout`` seconds
        """
        with self._lock:
            record = self._get_record(handle)

        if not record.done.wait(timeout):
            raise TimeoutError(f"Job {handle.job_id} did not finish within {timeout}s")

        return record.status

    def active_jobs(self) -> list[JobHandle]:
        """Handles of all pending or running jobs."""
        with self._lock:
            return [r.handle for r in self._records.values() if not r.status.is_terminal]

    def clear_finished(self) -> int:
        """Drop records of finished jobs. Returns how many were dropped."""
        with self._lock:
            finished = [
                job_id for job_id, r in self._records.items() if r.status.is_terminal and r.done.is_set()
            ]
            for job_id in finished:
                del self._records[job_id]
        return len(finished)

    def record_dismissed(self, operation: OperationKind) -> None:
        """Track a CANCELED event for an operation the user backed out of before submitting."""
        args = ("event tracker", self.event_tracker.track, operation, JobState.CANCELED)
        try:
            self._notifications.submit(self._call_listener, *args)
        except RuntimeError:
            # Notification thread already shut down.
            self._call_listener(*args)

    def shutdown(self, wait: bool = True, cancel_pending: bool = False) -> None:
        """
        Stop accepting jobs and release the worker threads.

        Args:
            wait: Block until running jobs and notifications finish
            cancel_pending: Cancel jobs that have not started yet
        """
        with self._lock:
            self._closed = True
            pending = [r.handle for r in self._records.values() if r.status.state is JobState.PENDING]

        if cancel_pending:
            for handle in pending:
                self.cancel(handle)

        self._workers.shutdown(wait=wait)
        self._notifications.shutdown(wait=wait)

    def __enter__(self) -> "JobScheduler":
        return self

    def __exit__(self, *args: Any) -> None:
        self.shutdown()

    def _get_record(self, handle: JobHandle) -> _JobRecord:
        try:
            return self._records[handle.job_id]
        except KeyError:
            raise JobNotFoundError(handle.job_id) from None

    def _run(self, record: _JobRecord) -> None:
        with self._lock:
            if record.status.is_terminal:
                return
            record.status = JobStatus.running()

        log_job_transition(record.handle, record.status)

        try:
            result = record.job.run()
        except Exception as e:
            outcome = JobStatus.failed(failure_reason(e))
            logger.warning(
                "%s of %s failed: %s",
                record.handle.operation.value,
                record.handle.repository_name,
                mask_sensitive_data(outcome.reason or ""),
            )
        else:
            outcome = JobStatus.succeeded(result)

        with self._lock:
            if record.job.cancel_requested:
                outcome = JobStatus.canceled()
            completed = self._complete_locked(record, outcome)

        if completed:
            self._dispatch(record, outcome)

    def _complete_locked(self, record: _JobRecord, outcome: JobStatus) -> bool:
        """Record the terminal status. Caller holds the lock."""
        if record.status.is_terminal:
            return False
        record.status = outcome
        if record.handle.operation is OperationKind.DELETE:
            self._active_deletes.discard(record.handle.repository_name)
        return True

    def _dispatch(self, record: _JobRecord, outcome: JobStatus) -> None:
        log_job_transition(record.handle, outcome)
        try:
            self._notifications.submit(self._notify, record, outcome)
        except RuntimeError:
            # Notification thread already shut down (shutdown(wait=False)).
            self._notify(record, outcome)

    def _notify(self, record: _JobRecord, outcome: JobStatus) -> None:
        try:
            self._call_listener("refresh notifier", self.refresh_notifier.notify_changed)
            self._call_listener(
                "event tracker", self.event_tracker.track, record.handle.operation, outcome.state
            )
            if record.callback is not None:
                self._call_listener("completion callback", record.callback, record.handle, outcome)
        finally:
            record.done.set()

    @staticmethod
    def _call_listener(description: str, fn: Callable[..., None], *args: Any) -> None:
        try:
            fn(*args)
        except Exception:
            logger.exception("Ignoring error raised by %s", description)
