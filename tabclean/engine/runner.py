from typing import Dict, Any, List, Optional, Callable, Tuple
import asyncio
import logging
import time

from tabclean.models import AnalysisState

logger = logging.getLogger(__name__)


class Pipeline:
    def __init__(self, stage_names: List[str], stage_map: Dict[str, Callable]):
        missing = [name for name in stage_names if name not in stage_map]
        if missing:
            raise ValueError(f"unknown stages: {', '.join(missing)}")
        self.stage_names = list(stage_names)
        self.stage_map = stage_map

    def __iter__(self):
        for name in self.stage_names:
            yield name, self.stage_map[name]


def _dump(state: AnalysisState) -> Dict[str, Any]:
    return state.analysis.to_dict() if state.analysis is not None else {}


def run_pipeline(pipeline: Pipeline, state: AnalysisState) -> Tuple[AnalysisState, List[Dict[str, Any]]]:
    """
    Run every stage in order, each one fully before the next. Stage errors
    propagate unchanged; no partial result is returned.
    """
    log = []
    for name, stage_fn in pipeline:
        start_ts = time.time()
        state = stage_fn(state)
        end_ts = time.time()
        logger.debug("stage %s finished in %.4fs", name, end_ts - start_ts)
        log.append({"stage": name, "start": start_ts, "end": end_ts})
    return state, log


async def stream_pipeline(pipeline: Pipeline, state: AnalysisState, run_id: Optional[str] = None):
    """
    Async generator that yields progress events while the pipeline runs.
    Yields dicts that can be sent directly over WebSocket.
    """
    yield {
        "type": "start",
        "run_id": run_id,
        "stages": list(pipeline.stage_names),
        "total_rows": len(state.table.rows),
        "total_columns": len(state.table.columns),
    }

    loop = asyncio.get_running_loop()
    for index, (name, stage_fn) in enumerate(pipeline):
        start_ts = time.time()
        # stages are sync and may be heavy; keep them off the event loop
        try:
            state = await loop.run_in_executor(None, stage_fn, state)
        except Exception as e:
            logger.warning("run %s failed in stage %s: %s", run_id, name, e)
            yield {"type": "error", "run_id": run_id, "stage": name, "message": str(e)}
            return

        yield {
            "type": "step",
            "run_id": run_id,
            "stage": name,
            "index": index,
            "duration": time.time() - start_ts,
        }

    yield {"type": "complete", "run_id": run_id, "analysis": _dump(state)}
