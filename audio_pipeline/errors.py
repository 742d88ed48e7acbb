"""
Exceptions raised by the voice pipeline stages
"""

# Stage names used to tag pipeline failures
STAGE_RESOLVE = "resolve"
STAGE_FETCH = "fetch"
STAGE_TRANSCODE = "transcode"
STAGE_TRANSCRIBE = "transcribe"
STAGE_SEND = "send"
STAGE_SUMMARIZE = "summarize"


class StageError(Exception):
    """Base class for a failure inside one stage adapter"""


class ResolveError(StageError):
    pass


class FetchError(StageError):
    pass


class TranscodeError(StageError):
    pass


class TranscriptionError(StageError):
    pass


class SummarizationError(StageError):
    pass


class PipelineError(Exception):
    """A stage failed; the rest of the pipeline was skipped"""

    def __init__(self, stage: str, cause: BaseException):
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage} stage failed: {cause}")
