"""Client-side polling loop for asynchronous generation jobs.

A :class:`PollingLoop` submits one job, then polls it on a fixed interval until
the job reaches a terminal state or the attempt ceiling is hit::

    idle -> submitting -> polling -> completed | failed

Exactly one poll task exists per loop and polls never overlap. Transport
errors, retryable API errors and unreadable responses count as an attempt but
do not change state.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Literal

import httpx

from contentforge.adapters.base import JobPollResult
from contentforge.client.api import ApiError, ContentForgeClient
from contentforge.domain.enums import JobStatus
from contentforge.domain.errors import ErrorCode
from contentforge.domain.models import JobHandle
from contentforge.logging import get_logger

logger = get_logger(__name__)

INITIAL_PROGRESS = 5
PROGRESS_CAP = 95

# Errors that cannot succeed on a later attempt
FATAL_CODES = frozenset(
    {
        ErrorCode.CONFIG_ERROR,
        ErrorCode.NOT_FOUND,
        ErrorCode.UNAUTHORIZED,
        ErrorCode.VALIDATION_ERROR,
    }
)


class LoopState(StrEnum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    POLLING = "polling"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class PollPolicy:
    """Seconds between polls and the attempt ceiling."""

    interval: float
    max_attempts: int


VIDEO_POLICY = PollPolicy(interval=5.0, max_attempts=60)
AVATAR_POLICY = PollPolicy(interval=8.0, max_attempts=75)


@dataclass
class PollState:
    """Observable state of one loop."""

    state: LoopState = LoopState.IDLE
    job: JobHandle | None = None
    status: JobStatus | None = None
    artifact_url: str | None = None
    attempts: int = 0
    progress: int = 0
    error: str | None = None


@dataclass(frozen=True)
class Notice:
    level: Literal["info", "success", "warning", "error"]
    message: str


SubmitFn = Callable[[], Awaitable[JobHandle]]
PollFn = Callable[[JobHandle], Awaitable[JobPollResult]]
SleepFn = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class ModalityFlow:
    """How to submit and poll one asynchronous modality."""

    label: str
    submit: SubmitFn
    poll: PollFn
    policy: PollPolicy


def describe_error(label: str, error: ApiError) -> str:
    """User-facing message for a structured API error."""
    match error.code:
        case ErrorCode.CONFIG_ERROR:
            return f"{label} generation is not configured. Ask an administrator to add the API key."
        case ErrorCode.RATE_LIMIT:
            return "Too many requests. Please try again in a moment."
        case ErrorCode.CONTENT_POLICY:
            return "Your prompt was rejected by the content policy. Please revise it."
        case ErrorCode.UNAUTHORIZED:
            return "Your session has expired. Please sign in again."
        case ErrorCode.VALIDATION_ERROR | ErrorCode.NOT_FOUND:
            return error.message
        case _:
            return f"{label} generation failed. Please try again."


class PollingLoop:
    """Drives one asynchronous job from submission to a terminal state."""

    def __init__(
        self,
        flow: ModalityFlow,
        on_notice: Callable[[Notice], None] | None = None,
        on_change: Callable[[PollState], None] | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.flow = flow
        self.state = PollState()
        self._on_notice = on_notice
        self._on_change = on_change
        self._sleep = sleep
        self._task: asyncio.Task[None] | None = None
        self._submission = 0
        self._done = asyncio.Event()

    @property
    def busy(self) -> bool:
        return self.state.state in (LoopState.SUBMITTING, LoopState.POLLING)

    def _notify(self, level: Literal["info", "success", "warning", "error"], message: str) -> None:
        if self._on_notice is not None:
            self._on_notice(Notice(level=level, message=message))

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(self.state)

    def _cancel_task(self) -> None:
        task = self._task
        self._task = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def submit(self) -> bool:
        """Submit a new job and start polling it.

        Returns False without doing anything while a job is in flight.
        """
        if self.busy:
            logger.info("poll_loop_busy", label=self.flow.label, state=self.state.state.value)
            return False

        self._cancel_task()
        self._done.clear()
        self._submission += 1
        submission = self._submission
        self.state = PollState(state=LoopState.SUBMITTING)
        self._changed()

        error: str | None = None
        try:
            handle = await self.flow.submit()
        except ApiError as e:
            logger.warning("job_submit_rejected", label=self.flow.label, code=e.code.value)
            error = describe_error(self.flow.label, e)
        except httpx.HTTPError as e:
            logger.warning("job_submit_transport_error", label=self.flow.label, error=str(e))
            error = f"{self.flow.label} generation failed. Please try again."

        # reset() or a newer submit() may have run while the call was in flight
        if submission != self._submission:
            logger.info("job_submit_superseded", label=self.flow.label)
            return True

        if error is not None:
            self._finish_failed(error)
            return True

        self._start(handle)
        self._notify("info", f"{self.flow.label} generation started. This can take a few minutes.")
        return True

    def attach(self, handle: JobHandle) -> bool:
        """Start polling an already-submitted job."""
        if self.busy:
            logger.info("poll_loop_busy", label=self.flow.label, state=self.state.state.value)
            return False

        self._cancel_task()
        self._done.clear()
        self.state = PollState()
        self._start(handle)
        return True

    def _start(self, handle: JobHandle) -> None:
        self.state.job = handle
        self.state.status = JobStatus.PENDING
        self.state.state = LoopState.POLLING
        self.state.progress = INITIAL_PROGRESS
        self._changed()

        logger.info("poll_loop_started", label=self.flow.label, job_id=handle.job_id)
        self._task = asyncio.create_task(self._run())

    async def _run(self) -> None:
        while self.state.state is LoopState.POLLING:
            await self._sleep(self.flow.policy.interval)
            if self.state.state is not LoopState.POLLING:
                break
            await self.poll_once()

    async def poll_once(self) -> None:
        """Run one poll attempt and apply its outcome."""
        handle = self.state.job
        assert handle is not None
        self.state.attempts += 1

        result: JobPollResult | None = None
        try:
            result = await self.flow.poll(handle)
        except ApiError as e:
            if e.code in FATAL_CODES:
                logger.warning("poll_fatal_error", label=self.flow.label, code=e.code.value)
                self._finish_failed(describe_error(self.flow.label, e))
                return
            logger.info("poll_error_ignored", label=self.flow.label, code=e.code.value)
        except httpx.HTTPError as e:
            logger.info("poll_transport_error", label=self.flow.label, error=str(e))

        if result is not None:
            if result.status is JobStatus.COMPLETED and result.artifact_url:
                self._finish_completed(result.artifact_url)
                return
            if result.status is JobStatus.FAILED:
                self._finish_failed(f"{self.flow.label} generation failed. Please try again.")
                return
            # completed without an artifact is still in progress
            if result.status is JobStatus.COMPLETED:
                self.state.status = JobStatus.PROCESSING
            else:
                self.state.status = result.status

        policy = self.flow.policy
        if self.state.attempts >= policy.max_attempts:
            logger.warning("poll_ceiling_reached", label=self.flow.label, attempts=self.state.attempts)
            self._finish_failed(f"{self.flow.label} generation timed out. Please try again.")
            return

        estimate = min(PROGRESS_CAP, round(100 * self.state.attempts / policy.max_attempts))
        self.state.progress = max(self.state.progress, estimate)
        self._changed()

    def _finish_completed(self, artifact_url: str) -> None:
        self.state.state = LoopState.COMPLETED
        self.state.status = JobStatus.COMPLETED
        self.state.artifact_url = artifact_url
        self.state.progress = 100
        self._changed()
        self._done.set()

        logger.info("poll_loop_completed", label=self.flow.label, attempts=self.state.attempts)
        self._notify("success", f"{self.flow.label} generated successfully!")

    def _finish_failed(self, message: str) -> None:
        self.state.state = LoopState.FAILED
        self.state.status = JobStatus.FAILED
        self.state.error = message
        self._changed()
        self._done.set()

        self._notify("error", message)

    def reset(self) -> None:
        """Stop polling and return to idle. The provider job is left alone."""
        self._cancel_task()
        self._submission += 1
        self.state = PollState()
        self._changed()
        self._done.set()

    async def retry(self) -> bool:
        """Discard the current job and submit again."""
        self.reset()
        return await self.submit()

    async def wait(self) -> PollState:
        """Block until the loop reaches a terminal state or is reset."""
        await self._done.wait()
        return self.state


# =============================================================================
# Flows backed by the HTTP API
# =============================================================================


def _unexpected_response(label: str) -> ApiError:
    return ApiError(
        status_code=200,
        code=ErrorCode.INTERNAL_ERROR,
        message=f"Unexpected {label} response from the server",
    )


def _job_handle(data: Any, job_key: str) -> JobHandle:
    try:
        return JobHandle(job_id=data[job_key], generation_id=data["generationId"])
    except (KeyError, TypeError) as e:
        raise _unexpected_response("submit") from e


def _poll_result(data: Any) -> JobPollResult:
    try:
        status = JobStatus(data["status"])
    except (KeyError, TypeError, ValueError) as e:
        raise _unexpected_response("poll") from e
    return JobPollResult(
        status=status,
        artifact_url=data.get("videoUrl"),
        progress=data.get("progress"),
    )


def video_flow(client: ContentForgeClient, body: dict[str, Any] | None = None) -> ModalityFlow:
    """Video flow; ``body`` is only needed when the loop submits."""

    async def submit() -> JobHandle:
        if body is None:
            raise ValueError("video_flow has no request body to submit")
        return _job_handle(await client.submit_video(**body), "taskId")

    async def poll(handle: JobHandle) -> JobPollResult:
        return _poll_result(await client.poll_video(handle.job_id, handle.generation_id))

    return ModalityFlow(label="Video", submit=submit, poll=poll, policy=VIDEO_POLICY)


def avatar_flow(client: ContentForgeClient, body: dict[str, Any] | None = None) -> ModalityFlow:
    """Avatar flow; ``body`` is only needed when the loop submits."""

    async def submit() -> JobHandle:
        if body is None:
            raise ValueError("avatar_flow has no request body to submit")
        return _job_handle(await client.submit_avatar(**body), "videoId")

    async def poll(handle: JobHandle) -> JobPollResult:
        return _poll_result(await client.poll_avatar(handle.job_id, handle.generation_id))

    return ModalityFlow(label="Avatar", submit=submit, poll=poll, policy=AVATAR_POLICY)
