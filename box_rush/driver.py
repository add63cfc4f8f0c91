"""
Frame Driver
=============
Fixed-rate loop that steps the simulation and renders each frame.

The loop is an explicit while loop guarded by a CancelToken; stop()
cancels the token so no further frame runs. Each start() hands out a
fresh token, so a driver torn down for a canvas resize can never
keep ticking the old session.
"""

from typing import Callable, Optional, Tuple
import random
import time

from loguru import logger

from .config import GameConfig, DEFAULT_CONFIG
from .errors import PlacementError
from .simulation import Simulation, TickReport


Bounds = Tuple[int, int]


class CancelToken:
    """Checked by the frame loop before every iteration."""

    def __init__(self):
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FrameDriver:
    """
    Owns the current Simulation and the loop that drives it.

    bounds_provider returns the canvas size; a size of zero in either
    direction means the canvas is not ready yet and the session start
    is deferred. A size change tears the session down and starts a
    new one. render is called after every step, including frozen ones.
    poll_input runs before each step and may read keys into the
    simulation.
    """

    def __init__(
        self,
        bounds_provider: Callable[[], Bounds],
        render: Callable[[Simulation, TickReport], None],
        config: GameConfig = DEFAULT_CONFIG,
        poll_input: Optional[Callable[[Simulation], None]] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.bounds_provider = bounds_provider
        self.render = render
        self.config = config
        self.poll_input = poll_input
        self.rng = rng or random.Random()
        self.clock = clock
        self.sleep = sleep

        self.simulation: Optional[Simulation] = None
        self.bounds: Optional[Bounds] = None
        self.frames = 0
        self._token: Optional[CancelToken] = None

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._token is not None and not self._token.cancelled

    def start(self) -> CancelToken:
        """Begin a session. Stops any previous one first."""
        self.stop()
        self._token = CancelToken()
        try:
            self._start_session()
        except PlacementError:
            logger.exception('Could not set up a new session')
            self.stop()
            raise
        return self._token

    def stop(self) -> None:
        """Cancel the loop and drop the scheduling token."""
        if self._token is not None:
            self._token.cancel()
            self._token = None
            logger.info(f'Frame driver stopped after {self.frames} frames')

    def restart(self) -> None:
        """Throw the current session away and begin a new one."""
        self.start()

    def _start_session(self) -> None:
        bounds = self.bounds_provider()
        self.bounds = bounds
        self.simulation = None
        if not _usable(bounds):
            logger.debug(f'Canvas not ready ({bounds}), deferring session start')
            return
        width, height = bounds
        self.simulation = Simulation(width, height, self.config, rng=self.rng,
                                     now=self.clock())
        logger.info(f'Session started on {width}x{height} canvas')

    # -------------------------------------------------------------------------
    # Loop
    # -------------------------------------------------------------------------

    def frame(self) -> Optional[TickReport]:
        """
        Run one iteration: check bounds, poll input, step, render.

        Returns None when no session is running yet. A PlacementError
        stops the driver and is re-raised to the caller.
        """
        bounds = self.bounds_provider()
        if bounds != self.bounds:
            if self.simulation is not None:
                logger.info(f'Canvas bounds changed {self.bounds} -> {bounds}, restarting')
            self.start()
        if self.simulation is None:
            return None

        if self.poll_input is not None:
            # Input may stop or restart the driver
            self.poll_input(self.simulation)
            if not self.running or self.simulation is None:
                return None

        simulation = self.simulation
        try:
            report = simulation.step(self.clock())
        except PlacementError:
            logger.exception('Spawn placement failed, stopping session')
            self.stop()
            raise

        self.frames += 1
        self.render(simulation, report)
        return report

    def run(self) -> None:
        """Run frames at the configured rate until stop() is called."""
        if not self.running:
            self.start()
        frame_time = self.config.frame_time

        # A bounds change swaps in a fresh token, so re-check every pass
        while self.running:
            started = self.clock()
            self.frame()

            # Sleep for remaining frame time
            elapsed = self.clock() - started
            remaining = frame_time - elapsed
            if remaining > 0.001 and self.running:
                self.sleep(remaining)

    def run_frames(self, count: int) -> int:
        """Run at most count frames without sleeping. Returns frames run."""
        if not self.running:
            self.start()
        ran = 0
        while ran < count and self.running:
            self.frame()
            ran += 1
        return ran


def _usable(bounds: Optional[Bounds]) -> bool:
    return bounds is not None and bounds[0] > 0 and bounds[1] > 0
