import random
import time

from docguard.config.settings import Settings


class SimulatedLatency:
    """Suspension point that imitates per-file processing time.

    Has no effect on results; uses its own random stream so that enabling
    it never shifts the analysis draws.
    """

    def __init__(self, min_seconds: float = 0.0, max_seconds: float = 0.0) -> None:
        if max_seconds < min_seconds:
            raise ValueError("max_seconds must not be lower than min_seconds")
        self._min_seconds = min_seconds
        self._max_seconds = max_seconds
        self._rng = random.Random()

    @classmethod
    def from_settings(cls, settings: Settings) -> "SimulatedLatency":
        return cls(settings.analysis_delay_min_seconds, settings.analysis_delay_max_seconds)

    def wait(self) -> None:
        if self._max_seconds <= 0:
            return
        time.sleep(self._rng.uniform(self._min_seconds, self._max_seconds))
