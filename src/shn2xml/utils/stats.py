"""
Statistics tracking for conversions.

Records how much of a file was written and how long it took, for the
summary line logged at the end of a run.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class ConversionStats:
    """
    Statistics for a single conversion.

    Tracks the schema width, the number of rows written and the timing of
    the serialization pass.
    """

    columns: int = 0
    rows_written: int = 0
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None

    @property
    def duration_seconds(self) -> float:
        """
        Calculate the duration in seconds.

        Uses end_time if the conversion finished, otherwise the current time.
        """
        if self.end_time:
            return self.end_time - self.start_time
        return time.time() - self.start_time

    @property
    def rows_per_second(self) -> float:
        """Rows written per second, 0 when no time has elapsed."""
        duration = self.duration_seconds
        if duration > 0:
            return self.rows_written / duration
        return 0

    @property
    def is_complete(self) -> bool:
        return self.end_time is not None

    def finish(self) -> None:
        """Mark the conversion as complete."""
        self.end_time = time.time()

    def summary(self) -> str:
        """
        Generate a human-readable summary.

        Returns:
            Formatted string with key metrics
        """
        parts = [
            f"Wrote {self.rows_written} rows",
            f"Columns: {self.columns}",
            f"Rate: {self.rows_per_second:.1f} rows/sec",
            f"Duration: {self.duration_seconds:.3f} seconds",
        ]
        return " | ".join(parts)

    def as_dict(self) -> Dict[str, Any]:
        """
        Export statistics as a dictionary.

        Returns:
            Dictionary containing all statistics
        """
        return {
            "columns": self.columns,
            "rows_written": self.rows_written,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration_seconds": self.duration_seconds,
            "rows_per_second": self.rows_per_second,
            "is_complete": self.is_complete,
        }
