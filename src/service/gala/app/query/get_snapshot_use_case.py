"""
Get Snapshot Use Case

Full current state in the same shape as a broadcast frame, stamped with the highest
logged sequence. A client that loads the snapshot and then sees frame n+1 has missed
nothing; a larger gap means it must reload.
"""

from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.serial_gate import SerialTransactionGate
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.gala.app.service.change_populator import ChangePopulator
from src.service.gala.domain.journal_entry import JournalEntry


class GetSnapshotUseCase:
    def __init__(
        self,
        *,
        gate: SerialTransactionGate,
        uow_factory: Callable[[], AbstractUnitOfWork],
    ) -> None:
        self.gate = gate
        self.uow_factory = uow_factory
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        gate: SerialTransactionGate = Depends(Provide[Container.serial_gate]),
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
    ) -> Self:
        return cls(gate=gate, uow_factory=uow_factory)

    @Logger.io
    async def execute(self) -> JournalEntry:
        with self.tracer.start_as_current_span('journal.snapshot'):
            # Holding the gate keeps the sequence and the state from the same commit
            async with self.gate.hold():
                async with self.uow_factory() as uow:
                    populator = ChangePopulator(uow=uow)
                    entry = await populator.mark_everything(entry=JournalEntry())
                    await populator.populate(entry=entry)
                    entry.sequence = await uow.journal_repo.max_sequence()
            return entry
