"""Job poller skill - bounded, cancellable polling of long-running jobs."""
from .job_poller import CancelToken, JobPoller, JobService, JobStatus

__all__ = ["CancelToken", "JobPoller", "JobService", "JobStatus"]
