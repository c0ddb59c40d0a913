"""Exceptions raised by the release tooling."""


class ReleaserError(RuntimeError):
    """Base class for errors reported to the operator by the CLI."""


class LaunchError(ReleaserError):
    """A command could not be spawned or waited on."""


class CommandFailed(ReleaserError):
    """A command exited non-zero and printed no tolerated output.

    Args:
        invocation: The CommandInvocation that was run.
        outcome: The ExecutionOutcome observed after the process terminated.
    """

    def __init__(self, invocation, outcome):
        super().__init__(f"command exited {outcome.exit_code}: {' '.join(invocation.argv)}")
        self.invocation = invocation
        self.outcome = outcome

    @property
    def exit_code(self):
        return self.outcome.exit_code


class VersionResolutionError(ReleaserError):
    pass


class ScaffoldError(ReleaserError):
    pass


class LockToolError(ReleaserError):
    pass


class LockFileError(ReleaserError):
    pass


class NoVcsRootFound(ReleaserError):
    pass
