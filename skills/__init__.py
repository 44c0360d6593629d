"""
Skills - the capabilities the panels are built on.

Each skill is a directory containing its implementation module:
- generation_client: one capability-dispatched entry point for Gemini
- job_poller: bounded, cancellable polling of long-running jobs (Veo)
- authorization: billable key gate for video generation
"""


from .errors import (
    GenerationError,
    ServiceUnavailableError,
    NoResultError,
    AuthorizationRequiredError,
    JobError,
    JobFailedError,
    JobTimeoutError,
    JobCancelledError,
)
from .job_poller.job_poller import CancelToken, JobPoller, JobService, JobStatus
from .generation_client.generation_client import GenerationClient, NOT_CONFIGURED_MESSAGE
from .authorization.authorization import (
    AuthorizationProvider,
    SelectedKeyAuthorizationProvider,
    StaticAuthorizationProvider,
)

__all__ = [
    "GenerationError",
    "ServiceUnavailableError",
    "NoResultError",
    "AuthorizationRequiredError",
    "JobError",
    "JobFailedError",
    "JobTimeoutError",
    "JobCancelledError",
    "CancelToken",
    "JobPoller",
    "JobService",
    "JobStatus",
    "GenerationClient",
    "NOT_CONFIGURED_MESSAGE",
    "AuthorizationProvider",
    "SelectedKeyAuthorizationProvider",
    "StaticAuthorizationProvider",
]
