"""Paced playback of a Dinitz run.

A ``Simulator`` owns at most one active run over a ``FlowNetwork``. Each
``start()`` bumps a version token, so a playback created by an earlier start
stops producing steps as soon as a newer run begins. Playback is single
threaded: render a step, sleep the configured delay, pull the next one.
Cancellation is cooperative and checked at every step boundary; it does not
roll back flows already pushed.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from dinitzviz.config import PLAYBACK_CONFIG, PlaybackConfig
from dinitzviz.lib.algorithms.base import NodeID, format_amount
from dinitzviz.lib.algorithms.dinitz import DinitzRun
from dinitzviz.lib.algorithms.types import AnyStep, MaxFlowResult
from dinitzviz.logging import get_logger
from dinitzviz.model.network import FlowNetwork

logger = get_logger(__name__)

Renderer = Callable[[AnyStep], None]


class Playback:
    """One paced replay of a run, tied to the simulator version that started it."""

    def __init__(
        self,
        simulator: "Simulator",
        run: DinitzRun,
        version: int,
        delay: float,
    ) -> None:
        self._simulator = simulator
        self.run = run
        self.version = version
        self.delay = delay
        self.cancelled = False

    @property
    def is_stale(self) -> bool:
        """True once a newer run has been started on the same simulator."""
        return self.version != self._simulator.version

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.is_stale or self.run.done)

    @property
    def result(self) -> Optional[MaxFlowResult]:
        """Final result, available once the run has been drained."""
        return self.run.result

    def cancel(self) -> None:
        """Stop pulling steps. Flows already pushed stay on the edges."""
        if not self.cancelled:
            self.cancelled = True
            self.run.close()
            logger.debug("Playback v%d cancelled", self.version)

    def step(self) -> Optional[AnyStep]:
        """Pull the next step, or None if the playback is finished or abandoned."""
        if self.cancelled or self.run.done:
            return None
        if self.is_stale:
            self.run.close()
            return None
        step = next(self.run, None)
        if step is None:
            self._simulator._finish(self)
        return step

    def play(self) -> Optional[MaxFlowResult]:
        """Render every remaining step with the configured pacing.

        Returns:
            The run result, or None if the playback was cancelled or
            superseded before the sequence ended.
        """
        render = self._simulator.renderer
        sleep = self._simulator.sleep
        while True:
            step = self.step()
            if step is None:
                break
            if render is not None:
                render(step)
            if self.delay > 0:
                sleep(self.delay)
        return self.result if self.run.done and not self.cancelled else None


class Simulator:
    """Drives step-by-step max-flow runs over a FlowNetwork.

    Args:
        network: Graph whose edges receive the computed flows.
        renderer: Called with each step in order (optional).
        config: Playback settings; defaults to ``PLAYBACK_CONFIG``.
        sleep: Suspension function used between steps (``time.sleep`` by default).
    """

    def __init__(
        self,
        network: FlowNetwork,
        renderer: Optional[Renderer] = None,
        *,
        config: Optional[PlaybackConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.network = network
        self.renderer = renderer
        self.config = config or PLAYBACK_CONFIG
        self.sleep = sleep
        self.version = 0
        self.current: Optional[Playback] = None

    @property
    def is_simulating(self) -> bool:
        return self.current is not None and self.current.active

    def start(
        self,
        source: Optional[NodeID] = None,
        sink: Optional[NodeID] = None,
        *,
        delay: Optional[float] = None,
        reset_flows: bool = True,
    ) -> Playback:
        """Start a new run, superseding any run in progress.

        Args:
            source: Source node; defaults to the network's source.
            sink: Sink node; defaults to the network's sink.
            delay: Seconds between steps; defaults to ``config.step_delay``.
            reset_flows: Zero all edge flows first so the result is the maximum flow.

        Returns:
            The new Playback.

        Raises:
            ValueError: If pre-checks are enabled and the roles are missing,
                equal, or the sink cannot be reached.
        """
        source = self.network.source if source is None else source
        sink = self.network.sink if sink is None else sink
        if self.config.validate_before_run:
            self.network.validate_for_run(source, sink)

        if self.current is not None and self.current.active:
            logger.info("Superseding run v%d", self.current.version)
            self.current.cancel()

        if reset_flows:
            self.network.reset_flows()

        self.version += 1
        run = DinitzRun(self.network.nodes, self.network.edges, source, sink)
        step_delay = self.config.step_delay if delay is None else delay
        playback = Playback(self, run, self.version, self.config.clamp_delay(step_delay))
        self.current = playback
        logger.info(
            "Starting run v%d: %s -> %s (%d nodes, %d edges)",
            self.version,
            source,
            sink,
            len(self.network.nodes),
            len(self.network.edges),
        )
        return playback

    def play(
        self,
        source: Optional[NodeID] = None,
        sink: Optional[NodeID] = None,
        *,
        delay: Optional[float] = None,
    ) -> Optional[MaxFlowResult]:
        """Start a run and play it to the end."""
        return self.start(source, sink, delay=delay).play()

    def cancel(self) -> None:
        """Cancel the run in progress, if any."""
        if self.current is not None:
            self.current.cancel()

    def _finish(self, playback: Playback) -> None:
        result = playback.result
        if result is not None:
            logger.info(
                "Run v%d finished: maxflow = %s after %d phase(s), %d step(s)",
                playback.version,
                format_amount(result.max_flow),
                result.phases,
                playback.run.steps_emitted,
            )
