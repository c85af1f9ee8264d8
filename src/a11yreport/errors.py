"""
Error taxonomy for the aggregation pipeline.

Source errors (MissingSourceFile, SourceParseError) never leave the readers:
they only classify why a tool fell back to its empty result. Output errors
(ReportWriteError) are fatal for the run.
"""


class AggregatorError(Exception):
    """Base class for all aggregator errors."""

    pass


class MissingSourceFile(AggregatorError):
    """A tool's result file does not exist in the reports directory."""

    pass


class SourceParseError(AggregatorError):
    """A tool's result file exists but could not be read as a JSON object."""

    pass


class UnknownToolError(AggregatorError, KeyError):
    """Raised when a tool name is not in the source registry."""

    pass


class ReportWriteError(AggregatorError):
    """Raised when the consolidated report cannot be persisted."""

    pass
