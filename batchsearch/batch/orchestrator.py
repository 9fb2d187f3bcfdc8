"""
batch/orchestrator.py — BatchOrchestrator
Walks a batch's keywords one by one: SearchClient → ResultSink.
"""
import threading
import time

from batchsearch.search import SearchClient
from .sink import ResultSink
from .state import ABORTED, DONE, STOPPED, BatchLogger, BatchRequest, BatchState


class BatchOrchestrator:
    """
    Sequential on purpose: a 429 ends the batch before the next keyword is
    sent. Each call to .run() is independent, so one instance serves every
    request thread.
    """

    def __init__(self, client: SearchClient):
        self.client = client

    def run(
        self,
        request: BatchRequest,
        sink: ResultSink,
        logger: BatchLogger = None,
        stop_event: threading.Event = None,
    ) -> BatchState:
        logger = logger or BatchLogger()
        state  = BatchState(batch_id=sink.name, stop_event=stop_event)
        params = request.params
        t0     = time.time()

        logger.log(f"BATCH   : {state.batch_id}", "system")

        state.status = "processing"
        for kw in request.keywords():
            if state.is_stopped():
                state.status = STOPPED
                logger.log("Batch stopped by caller.", "warn")
                break

            state.attempted.append(kw)
            outcome = self.client.query(kw, params, stop_event=stop_event)

            if outcome.is_rate_limited:
                state.status = ABORTED
                logger.log(f"{outcome.describe()} — skipping the rest of the batch", "warn")
                break

            if not outcome.ok:
                state.errors.append(outcome.describe())
                logger.error(outcome.describe())
                continue

            for link in outcome.links:
                sink.append(link)
            state.links_written += len(outcome.links)
            logger.log(f"  {outcome.describe()}", "success")
        else:
            state.status = STOPPED if state.is_stopped() else DONE

        elapsed = round(time.time() - t0, 1)
        logger.log(
            f"Batch {state.status} in {elapsed}s — {state.links_written} links "
            f"from {len(state.attempted)} keywords",
            "success" if state.status == DONE else "warn",
        )
        return state
