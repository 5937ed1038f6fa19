from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ProfilerData:
    fps: float = 0.0
    frame_time: float = 0.0
    last_timestamp: float = 0.0

    def update(self, time_ms: float) -> None:
        """Record a frame timestamp in milliseconds; the first one only primes the clock."""
        time_ms = float(time_ms)
        if self.last_timestamp == 0.0:
            self.last_timestamp = time_ms
            return

        elapsed = time_ms - self.last_timestamp
        self.last_timestamp = time_ms
        self.frame_time = elapsed
        self.fps = 1000.0 / elapsed if elapsed > 0.0 else 0.0
