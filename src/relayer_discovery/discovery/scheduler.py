"""Periodic, concurrent health probing of the relayer pool."""

import asyncio
import contextlib
from datetime import UTC, datetime

import structlog

from relayer_discovery.discovery.freshness import FreshnessTracker
from relayer_discovery.discovery.prober import RelayerHealthProber
from relayer_discovery.discovery.relayers import ordinal_sort_key, relayer_ids
from relayer_discovery.domain.exceptions import MembershipStoreError
from relayer_discovery.domain.models import RoundSummary
from relayer_discovery.infrastructure.store.base import MembershipStore
from relayer_discovery.observability.logging.correlation import CorrelationContext

logger = structlog.get_logger(__name__)


class HealthProbeScheduler:
    """Runs a health-check round on start and then every interval.

    Each round probes every configured relayer concurrently and waits for all
    probes to settle. Healthy relayers are added to the shared active set and
    unhealthy ones removed; a failing relayer rejoins on the first round in
    which it answers again.

    Rounds are started on a fixed cadence and are not serialized: a round that
    outlives the interval overlaps with the next one. ``stop()`` only cancels
    the timer; rounds already in flight run to completion.
    """

    def __init__(
        self,
        store: MembershipStore,
        prober: RelayerHealthProber,
        freshness: FreshnessTracker,
        relayer_count: int,
        interval_seconds: float,
    ):
        """Initialize the scheduler.

        Args:
            store: Shared set of active relayers
            prober: Health prober for a single relayer
            freshness: Last-probe timestamps, shared with the status aggregator
            relayer_count: Configured pool size
            interval_seconds: Delay between round starts
        """
        self.store = store
        self.prober = prober
        self.freshness = freshness
        self.relayer_count = relayer_count
        self.interval_seconds = interval_seconds

        self._timer_task: asyncio.Task[None] | None = None
        self._rounds: set[asyncio.Task[RoundSummary]] = set()
        self._started = False
        self._stop_requested = False

    @property
    def is_running(self) -> bool:
        return self._timer_task is not None and not self._timer_task.done()

    @property
    def in_flight_rounds(self) -> tuple[asyncio.Task[RoundSummary], ...]:
        """Timer-started rounds that have not settled yet."""
        return tuple(self._rounds)

    async def start(self) -> None:
        """Run the first round, then schedule the recurring timer."""
        if self._started:
            logger.warning("Health probe scheduler already started")
            return

        self._started = True
        self._stop_requested = False
        logger.info(
            "Starting health probe scheduler",
            relayer_count=self.relayer_count,
            interval_seconds=self.interval_seconds,
            timeout_seconds=self.prober.timeout,
        )

        await self.run_round()

        if self._stop_requested:
            return
        self._timer_task = asyncio.create_task(
            self._timer_loop(), name="relayer-health-timer"
        )

    async def stop(self) -> None:
        """Cancel future rounds. Safe before ``start()`` and when repeated."""
        self._stop_requested = True
        self._started = False

        task = self._timer_task
        if task is None:
            return

        self._timer_task = None
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info(
            "Stopped health probe scheduler", in_flight_rounds=len(self._rounds)
        )

    async def _timer_loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            if self._rounds:
                logger.warning(
                    "Starting round while previous round still in flight",
                    in_flight_rounds=len(self._rounds),
                )
            task = asyncio.create_task(self.run_round())
            self._rounds.add(task)
            task.add_done_callback(self._on_round_done)

    def _on_round_done(self, task: asyncio.Task[RoundSummary]) -> None:
        self._rounds.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                "Health check round failed", error=str(error), exc_info=error
            )

    async def run_round(self) -> RoundSummary:
        """Probe every configured relayer and reconcile the active set."""
        summary = RoundSummary(started_at=datetime.now(UTC))
        ids = relayer_ids(self.relayer_count)

        with CorrelationContext():
            outcomes = await asyncio.gather(
                *(self._probe_and_reconcile(relayer_id, summary) for relayer_id in ids),
                return_exceptions=True,
            )

            for relayer_id, outcome in zip(ids, outcomes):
                if isinstance(outcome, BaseException):
                    logger.error(
                        "Unexpected error reconciling relayer",
                        relayer_id=relayer_id,
                        error=str(outcome),
                    )

            summary.finished_at = datetime.now(UTC)
            summary.healthy.sort(key=ordinal_sort_key)
            summary.unhealthy.sort(key=ordinal_sort_key)
            logger.debug(
                "Health check round completed",
                total=summary.total,
                healthy=len(summary.healthy),
                unhealthy=len(summary.unhealthy),
                store_errors=len(summary.store_errors),
                duration_ms=round(summary.duration_ms, 2),
            )

        return summary

    async def _probe_and_reconcile(self, relayer_id: str, summary: RoundSummary) -> None:
        try:
            result = await self.prober.probe(relayer_id)
            healthy, checked_at = result.healthy, result.checked_at
        except Exception as e:
            logger.error("Health probe raised", relayer_id=relayer_id, error=str(e))
            healthy, checked_at = False, None

        # Timestamp is recorded regardless of outcome
        self.freshness.touch(relayer_id, checked_at)
        (summary.healthy if healthy else summary.unhealthy).append(relayer_id)

        try:
            if healthy:
                if await self.store.add(relayer_id):
                    logger.info("Added relayer to active set", relayer_id=relayer_id)
            elif await self.store.remove(relayer_id):
                logger.warning("Removed relayer from active set", relayer_id=relayer_id)
        except MembershipStoreError as e:
            summary.store_errors.append(relayer_id)
            logger.error(
                "Failed to update active set",
                relayer_id=relayer_id,
                operation=e.operation,
                error=str(e),
            )
