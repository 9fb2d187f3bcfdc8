from .orchestrator import BatchOrchestrator
from .sink import ResultSink, SinkCreateError
from .state import BatchLogger, BatchRequest, BatchState

__all__ = [
    "BatchOrchestrator", "ResultSink", "SinkCreateError",
    "BatchLogger", "BatchRequest", "BatchState",
]
