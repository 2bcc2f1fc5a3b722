"""Exception types raised by oculurum, each mapped to a process exit code."""


class OculurumError(Exception):
    exit_code = 1

    def __init__(self, message, exit_code=None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class UsageError(OculurumError):
    exit_code = 1


class PlanningError(OculurumError):
    """Input could not be sized, so no image dimension can be fixed."""
    exit_code = 8


class MetadataUnavailable(PlanningError):
    pass


class TraversalFailed(PlanningError):
    pass


class OutputPathError(OculurumError):
    exit_code = 5


class SinkInitError(OculurumError):
    # 6 = header/configuration stage, 7 = output stream stage
    exit_code = 6


class SinkWriteError(OculurumError):
    exit_code = 9
