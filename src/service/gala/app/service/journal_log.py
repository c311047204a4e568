from datetime import datetime, timezone
from typing import Optional

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.gala_metrics import metrics
from src.service.gala.app.service.change_populator import ChangePopulator
from src.service.gala.domain.journal_entry import JournalEntry


class JournalLog:
    """Append a populated entry to the audit table inside the current transaction."""

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow
        self.populator = ChangePopulator(uow=uow)

    async def log(self, *, actor: Optional[str], entry: JournalEntry) -> JournalEntry:
        await self.populator.populate(entry=entry)
        entry.sequence = await self.uow.journal_repo.append(
            user=actor or None,
            timestamp=datetime.now(timezone.utc).isoformat(timespec='seconds'),
            change=entry.serialize().decode(),
        )
        metrics.record_journal_append(sequence=entry.sequence)
        Logger.base.info(
            f'📝 [JOURNAL] #{entry.sequence} by {actor or "-"}: '
            f'{len(entry.tables)}t {len(entry.parties)}p {len(entry.guests)}g '
            f'{len(entry.items)}i {len(entry.purchases)}$'
            f'{" +bidders" if entry.bidder_remap_marked else ""}'
        )
        return entry
