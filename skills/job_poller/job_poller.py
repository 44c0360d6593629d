"""
Job Poller Skill - drive a long-running generation job to completion.

Veo does not answer in one call: generate_videos() hands back an operation
that has to be polled until it reports done. The poller owns that loop:

    submit once -> wait, query status (repeat) -> done -> fetch result

Polling is bounded by a maximum attempt count and a wall-clock deadline,
and the CancelToken is checked around every remote call as well as
interrupting the waits between them. The last wait is cut short so a run
never sleeps past its deadline.
"""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, Protocol

from config import (
    VIDEOS_DIR,
    VIDEO_MAX_POLL_ATTEMPTS,
    VIDEO_MAX_WAIT_SECONDS,
    VIDEO_POLL_INTERVAL_SECONDS,
)
from models.generation import VideoRequest, VideoResult
from models.job import GenerationJob, JobState
from skills.errors import (
    JobCancelledError,
    JobError,
    JobFailedError,
    JobTimeoutError,
    NoResultError,
)

logger = logging.getLogger(__name__)


@dataclass
class JobStatus:
    """What the service reported about a job on one call."""
    job_id: str
    handle: Any = None
    done: bool = False
    locator: Optional[str] = None
    error: Optional[str] = None


class JobService(Protocol):
    """The three remote calls a job needs."""

    async def submit_job(self, request: VideoRequest) -> JobStatus: ...

    async def poll_job(self, handle: Any) -> JobStatus: ...

    async def fetch_result(self, locator: str) -> bytes: ...


class CancelToken:
    """Cooperative cancellation shared between a caller and a running job."""

    def __init__(self):
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()


class JobPoller:
    """
    Submit a job, poll it until the service says it is done, fetch the result.

    Exactly one status query is issued per wait. The submission response
    itself is not counted as a status query.
    """

    def __init__(
        self,
        service: JobService,
        poll_interval: float = VIDEO_POLL_INTERVAL_SECONDS,
        max_attempts: int = VIDEO_MAX_POLL_ATTEMPTS,
        max_wait: float = VIDEO_MAX_WAIT_SECONDS,
        output_dir: Path = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.service = service
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self.max_wait = max_wait
        self.output_dir = output_dir or VIDEOS_DIR
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self._sleep = sleep
        self._clock = clock

        # Most recent job, kept for inspection after a run
        self.last_job: Optional[GenerationJob] = None

    def bind(self, service: JobService) -> "JobPoller":
        """Same bounds, clock and output directory, driving another service."""
        return JobPoller(
            service,
            poll_interval=self.poll_interval,
            max_attempts=self.max_attempts,
            max_wait=self.max_wait,
            output_dir=self.output_dir,
            sleep=self._sleep,
            clock=self._clock,
        )

    async def run(
        self,
        request: VideoRequest,
        cancel_token: Optional[CancelToken] = None,
    ) -> VideoResult:
        """
        Drive `request` through SUBMITTED -> PENDING* -> DONE -> FETCHED.

        Raises:
            JobFailedError: any submit/poll/fetch call raised, or the job
                finished with an error
            NoResultError: the job finished without a result locator
            JobTimeoutError: attempt or deadline bound reached
            JobCancelledError: cancel_token was cancelled
        """
        started = self._clock()
        self._check_cancelled(cancel_token)

        try:
            status = await self.service.submit_job(request)
        except Exception as e:
            logger.error(f"[JobPoller] Submission failed: {e}")
            raise JobFailedError(f"Job submission failed: {e}") from e

        job = GenerationJob(job_id=status.job_id, handle=status.handle)
        self.last_job = job
        self._apply(job, status)
        logger.info(f"[JobPoller] Job submitted: {job.job_id}")

        try:
            while not job.done:
                elapsed = self._clock() - started
                if job.polls >= self.max_attempts:
                    raise JobTimeoutError(f"Job {job.job_id} still pending after {job.polls} polls")
                if elapsed >= self.max_wait:
                    raise JobTimeoutError(f"Job {job.job_id} timed out after {elapsed:.0f}s")

                logger.info(f"[JobPoller] Waiting for {job.job_id}... ({elapsed:.0f}s, poll {job.polls + 1})")
                await self._wait(min(self.poll_interval, self.max_wait - elapsed), cancel_token)

                status = await self.service.poll_job(job.handle)
                job.polls += 1
                self._check_cancelled(cancel_token)
                self._apply(job, status)
                if not job.done:
                    job.advance(JobState.PENDING)

            if job.error:
                raise JobFailedError(f"Job {job.job_id} failed: {job.error}")
            job.advance(JobState.DONE)

            if not job.locator:
                raise NoResultError("Video generation failed or returned no URI.")

            self._check_cancelled(cancel_token)
            data = await self.service.fetch_result(job.locator)
            self._check_cancelled(cancel_token)
            result = self._store(job, data)
            job.advance(JobState.FETCHED)

        except (JobError, NoResultError) as e:
            job.fail(str(e))
            logger.error(f"[JobPoller] {e}")
            raise
        except Exception as e:
            job.fail(str(e))
            logger.error(f"[JobPoller] Job {job.job_id} error: {e}")
            raise JobFailedError(f"Video generation failed: {e}") from e

        logger.info(f"[JobPoller] Job {job.job_id} fetched after {job.polls} polls: {result.name}")
        return result

    def _apply(self, job: GenerationJob, status: JobStatus) -> None:
        """Copy one status report onto the job."""
        job.done = status.done
        job.locator = status.locator
        job.error = status.error
        if status.handle is not None:
            job.handle = status.handle

    async def _wait(self, seconds: float, cancel_token: Optional[CancelToken]) -> None:
        """Sleep `seconds`, waking early if cancelled."""
        if cancel_token is None:
            await self._sleep(seconds)
            return

        sleeper = asyncio.ensure_future(self._sleep(seconds))
        canceller = asyncio.ensure_future(cancel_token.wait())
        try:
            await asyncio.wait({sleeper, canceller}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (sleeper, canceller):
                if not task.done():
                    task.cancel()
        self._check_cancelled(cancel_token)

    def _check_cancelled(self, cancel_token: Optional[CancelToken]) -> None:
        if cancel_token is not None and cancel_token.cancelled:
            raise JobCancelledError("Job cancelled")

    def _store(self, job: GenerationJob, data: bytes) -> VideoResult:
        """Write fetched bytes to disk so the video has a local address."""
        if not data:
            raise NoResultError("Downloaded video is empty")

        video_id = str(uuid.uuid4())[:8]
        video_path = self.output_dir / f"video_{video_id}.mp4"
        video_path.write_bytes(data)

        return VideoResult(
            path=video_path,
            uri=job.locator,
            size_bytes=len(data),
            job_id=job.job_id,
        )
