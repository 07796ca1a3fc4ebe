"""Output flow control with a high/low watermark.

Counts bytes written to the terminal that it has not yet acknowledged.
Once the count goes above the high mark the producer is asked to slow
down, and it stays that way until the count drops below the low mark.
"""

from __future__ import annotations

DEFAULT_HIGH_WATERMARK = 10000
DEFAULT_LOW_WATERMARK = 1000


class Watermark:
    """Tracks outstanding output and exposes an advisory ready flag.

    Writes are never refused; :attr:`accepting_input` only tells callers
    whether they should hold back. Acknowledgements may arrive in any
    order since only the total outstanding count is kept.
    """

    def __init__(
        self,
        high: int = DEFAULT_HIGH_WATERMARK,
        low: int = DEFAULT_LOW_WATERMARK,
    ) -> None:
        if low < 0 or high < 0:
            raise ValueError("watermarks must not be negative")
        if low >= high:
            raise ValueError(f"low watermark ({low}) must be below high watermark ({high})")
        self.high = high
        self.low = low
        self._outstanding = 0
        self._high_water = False

    @property
    def outstanding(self) -> int:
        return self._outstanding

    @property
    def accepting_input(self) -> bool:
        return not self._high_water

    def on_write(self, n: int) -> None:
        self._outstanding += n
        if self._outstanding > self.high:
            self._high_water = True

    def on_flushed(self, n: int) -> None:
        self._outstanding = max(self._outstanding - n, 0)
        if self._high_water and self._outstanding < self.low:
            self._high_water = False

    def reset(self) -> None:
        self._outstanding = 0
        self._high_water = False
