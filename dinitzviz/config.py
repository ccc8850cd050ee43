"""Configuration classes for DinitzViz components."""

from dataclasses import dataclass


@dataclass
class PlaybackConfig:
    """Configuration for step-by-step playback of a max-flow run."""

    # Seconds to wait after rendering each step
    step_delay: float = 0.35

    # Bounds applied to any requested delay
    min_delay: float = 0.0
    max_delay: float = 5.0

    # Run source/sink pre-checks before starting a simulation
    validate_before_run: bool = True

    def clamp_delay(self, delay: float) -> float:
        """Clamp a requested per-step delay into [min_delay, max_delay]."""
        return max(self.min_delay, min(delay, self.max_delay))


# Global configuration instance
PLAYBACK_CONFIG = PlaybackConfig()
