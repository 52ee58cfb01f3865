from typing import Callable, Dict, List, Optional

# stage name -> callable(AnalysisState) -> AnalysisState, in registration order
STAGES: Dict[str, Callable] = {}


def register(name: str):
    """Register a pipeline stage. Stages run in the order they were registered."""
    def decorator(fn):
        existing = STAGES.get(name)
        if existing is not None and existing is not fn:
            raise ValueError(f"stage '{name}' is already registered")
        STAGES[name] = fn
        return fn
    return decorator


def get_stage(name: str) -> Optional[Callable]:
    return STAGES.get(name)


def list_stages() -> List[str]:
    return list(STAGES.keys())
