"""
Errors raised by the generation skills.

Panels catch `GenerationError` (and anything the SDK raises) at their
boundary and turn it into a friendly message.
"""


class GenerationError(RuntimeError):
    """Base class for generation failures."""


class ServiceUnavailableError(GenerationError):
    """No credential is configured for the remote service."""


class NoResultError(GenerationError):
    """The service answered but produced nothing usable."""


class AuthorizationRequiredError(GenerationError):
    """A billable key must be selected before this action can run."""


class JobError(GenerationError):
    """A long-running job did not reach a usable result."""


class JobFailedError(JobError):
    """Submission, polling or fetching a job raised, or the job reported an error."""


class JobTimeoutError(JobError):
    """The job did not finish within the poll attempt or wall-clock bound."""


class JobCancelledError(JobError):
    """The caller cancelled the job while it was waiting."""
