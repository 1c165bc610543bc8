"""
Sink for non-fatal build warnings.
"""
import logging
from typing import Callable, List

Warner = Callable[..., None]

logger = logging.getLogger(__name__)


def printf(fmt: str, *args):
    """Default sink: log the warning"""
    logger.warning(fmt % args if args else fmt)


class Collect:
    """Collects warnings in memory, for tests and summaries"""

    def __init__(self):
        self.warnings: List[str] = []

    def warnf(self, fmt: str, *args):
        self.warnings.append(fmt % args if args else fmt)

    __call__ = warnf
