"""
The single path by which a mutation reaches the store and the live subscribers.

    gate -> transaction -> business logic (marks entry) -> populate + journal row
         -> commit -> broadcast -> release gate

Broadcasting before the gate is released keeps delivery order equal to commit order.
Rejections and failures roll back, release the gate and write no journal row.
"""

import time
from typing import Awaitable, Callable, Optional

from opentelemetry import trace

from src.platform.database.serial_gate import SerialTransactionGate
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.gala_metrics import metrics
from src.service.gala.app.interface.i_journal_broadcaster import IJournalBroadcaster
from src.service.gala.app.service.entity_lifecycle import EntityLifecycle
from src.service.gala.app.service.journal_log import JournalLog
from src.service.gala.domain.journal_entry import JournalEntry


Mutation = Callable[[EntityLifecycle], Awaitable[None]]


class MutationRunner:
    def __init__(
        self,
        *,
        gate: SerialTransactionGate,
        uow_factory: Callable[[], AbstractUnitOfWork],
        broadcaster: IJournalBroadcaster,
    ) -> None:
        self.gate = gate
        self.uow_factory = uow_factory
        self.broadcaster = broadcaster
        self.tracer = trace.get_tracer(__name__)

    async def run(
        self, *, operation: str, actor: Optional[str], mutation: Mutation
    ) -> JournalEntry:
        with self.tracer.start_as_current_span(
            'journal.run_mutation', attributes={'gala.operation': operation}
        ) as span:
            wait_started = time.perf_counter()
            try:
                async with self.gate.hold():
                    metrics.gate_wait_duration.observe(time.perf_counter() - wait_started)
                    with metrics.mutation_duration.labels(operation=operation).time():
                        entry = await self._run_locked(actor=actor, mutation=mutation)
            except CustomBaseError as e:
                metrics.record_mutation(operation=operation, outcome='rejected')
                span.set_attribute('gala.outcome', 'rejected')
                Logger.base.info(f'🚫 [MUTATION] {operation} rejected: {e.message}')
                raise
            except Exception:
                metrics.record_mutation(operation=operation, outcome='failed')
                span.set_attribute('gala.outcome', 'failed')
                raise

            metrics.record_mutation(operation=operation, outcome='committed')
            span.set_attribute('gala.outcome', 'committed')
            span.set_attribute('gala.sequence', entry.sequence)
            return entry

    async def _run_locked(self, *, actor: Optional[str], mutation: Mutation) -> JournalEntry:
        async with self.uow_factory() as uow:
            entry = JournalEntry()
            await mutation(EntityLifecycle(uow=uow, entry=entry))
            await JournalLog(uow=uow).log(actor=actor, entry=entry)
            await uow.commit()
        # Committed: subscribers may now see it
        await self.broadcaster.broadcast(entry.to_message())
        return entry
