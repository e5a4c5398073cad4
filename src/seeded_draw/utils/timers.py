import time
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class Timer:
    """
    Context manager timing a batch of draws.

    Call :meth:`tick` once per completed draw to get a throughput in the
    closing log message.
    """

    def __init__(self, name: str = "draws", log_level: int = logging.INFO):
        self.name = name
        self.log_level = log_level
        self.count = 0
        self.start_time = None
        self.elapsed = None

    def tick(self, n: int = 1) -> None:
        self.count += n

    @property
    def rate(self) -> Optional[float]:
        """Draws per second, None until the timer has stopped."""
        if not self.elapsed:
            return None
        return self.count / self.elapsed

    def __enter__(self):
        self.start_time = time.perf_counter()
        logger.log(self.log_level, f"Starting {self.name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = time.perf_counter() - self.start_time
        message = f"Completed {self.name} in {self.elapsed:.3f}s"
        if self.rate is not None:
            message += f" ({self.count} draws, {self.rate:.1f} draws/s)"
        logger.log(self.log_level, message)
