"""
Stage outcomes for the installer workflow.

Each workflow stage is run through run_stage(), which returns a StageResult
instead of letting installer errors unwind the stack. The driver inspects the
result and stops at the first failure.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from setup_bindiff.core.exceptions import SetupBinDiffError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class StageResult(Generic[T]):
    """Result of one workflow stage."""

    stage: str
    """Stage name, e.g. 'resolve-platform'"""

    value: Optional[T] = None
    """Stage output on success"""

    error: Optional[Exception] = None
    """Failure cause, None on success"""

    @property
    def ok(self) -> bool:
        return self.error is None


def run_stage(name: str, func: Callable[..., T], *args: Any, **kwargs: Any) -> StageResult[T]:
    """
    Run a stage, capturing installer and OS errors as a failed result.

    Any other exception is a bug and propagates.
    """
    logger.debug(f"Stage '{name}' started")
    try:
        value = func(*args, **kwargs)
    except (SetupBinDiffError, OSError) as e:
        logger.debug(f"Stage '{name}' failed: {e}")
        return StageResult(stage=name, error=e)

    logger.debug(f"Stage '{name}' finished")
    return StageResult(stage=name, value=value)
