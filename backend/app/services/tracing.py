from typing import Callable
from shared.config import settings

# No-op decorator unless LangSmith tracing is switched on
def traceable(name: str, run_type: str = "chain") -> Callable:
    if not settings.langsmith_tracing:
        def _wrap(func):
            return func
        return _wrap

    # Lazy import to avoid hard dependency if disabled
    from langsmith import traceable as _traceable  # type: ignore
    return _traceable(name=name, run_type=run_type, project_name=settings.langsmith_project)
