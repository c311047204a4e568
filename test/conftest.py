"""
Test Configuration and Fixtures

This module provides:
- A throwaway SQLite file per integration test
- A mutation runner whose broadcasts are recorded instead of fanned out
- Builders for tables, parties, guests and items that go through the entity lifecycle

Architecture:
- Unit tests (marker `unit`): pure logic and fakes, no database
- Integration tests (marker `integration`): real SQLite through SQLAlchemy + aiosqlite
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# settings is read at import time
# =============================================================================
import os
from pathlib import Path
import tempfile


def _early_setup_test_environment() -> None:
    test_db_dir = Path(tempfile.mkdtemp(prefix='gala_test_'))
    os.environ['DATABASE_URL'] = f'sqlite+aiosqlite:///{test_db_dir / "gala.db"}'

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ.setdefault('WEBSOCKET_ALLOWED_ORIGINS', '')


_early_setup_test_environment()

from collections.abc import AsyncGenerator, Callable  # noqa: E402
from typing import List, Optional  # noqa: E402

import pytest  # noqa: E402

from src.platform.database.orm_db_setting import AsyncEngineManager, Database  # noqa: E402
from src.platform.database.serial_gate import SerialTransactionGate  # noqa: E402
from src.platform.database.unit_of_work import AbstractUnitOfWork, SqlAlchemyUnitOfWork  # noqa: E402
from src.service.gala.app.interface.i_journal_broadcaster import IJournalBroadcaster  # noqa: E402
from src.service.gala.app.service.entity_lifecycle import EntityLifecycle  # noqa: E402
from src.service.gala.app.service.mutation_runner import MutationRunner  # noqa: E402
from src.service.gala.domain.entity.guest_entity import Guest, build_sortname  # noqa: E402
from src.service.gala.domain.entity.item_entity import Item  # noqa: E402
from src.service.gala.domain.entity.party_entity import Party  # noqa: E402
from src.service.gala.domain.entity.table_entity import Table  # noqa: E402


# =============================================================================
# Fakes
# =============================================================================
class RecordingBroadcaster(IJournalBroadcaster):
    """Keeps every broadcast frame in order instead of fanning it out."""

    def __init__(self) -> None:
        self.messages: List[bytes] = []

    async def subscribe(self):
        raise NotImplementedError

    async def unsubscribe(self, stream) -> None:
        raise NotImplementedError

    async def broadcast(self, message: bytes) -> None:
        self.messages.append(message)


# =============================================================================
# Database Fixtures
# =============================================================================
@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database, None]:
    db = Database(AsyncEngineManager(database_url=f'sqlite+aiosqlite:///{tmp_path / "gala.db"}'))
    await db.create_tables()
    yield db
    await db.dispose()


@pytest.fixture
def uow_factory(database: Database) -> Callable[[], AbstractUnitOfWork]:
    return lambda: SqlAlchemyUnitOfWork(session_factory=database.session)


@pytest.fixture
def recording_broadcaster() -> RecordingBroadcaster:
    return RecordingBroadcaster()


@pytest.fixture
def mutation_runner(
    uow_factory: Callable[[], AbstractUnitOfWork], recording_broadcaster: RecordingBroadcaster
) -> MutationRunner:
    return MutationRunner(
        gate=SerialTransactionGate(),
        uow_factory=uow_factory,
        broadcaster=recording_broadcaster,
    )


# =============================================================================
# Builders (each runs one committed mutation)
# =============================================================================
class GalaBuilder:
    def __init__(self, runner: MutationRunner) -> None:
        self.runner = runner

    async def item(self, *, name: str = 'Gala Ticket', amount: int = 150, value: int = 50) -> int:
        created: List[int] = []

        async def mutation(lifecycle: EntityLifecycle) -> None:
            item = await lifecycle.save_item(item=Item(name=name, amount=amount, value=value))
            created.append(item.id)

        await self.runner.run(operation='test_item', actor=None, mutation=mutation)
        return created[0]

    async def party(self, *names: str, table_number: int = 0, payer_of: Optional[dict] = None) -> dict:
        """
        Seat a new party of guests at a new table with the given number.

        payer_of maps a guest name to the name of the guest who pays for them.
        Returns {'table': id, 'party': id, <name>: guest id, ...}.
        """
        payer_of = payer_of or {}
        ids: dict = {}

        async def mutation(lifecycle: EntityLifecycle) -> None:
            table = await lifecycle.save_table(table=Table(number=table_number))
            party = await lifecycle.save_party(party=Party(table_id=table.id))
            ids['table'], ids['party'] = party.table_id, party.id
            for name in names:
                guest = await lifecycle.save_guest(
                    guest=Guest(name=name, sortname=build_sortname(name), party_id=party.id)
                )
                ids[name] = guest.id
            for payee, payer in payer_of.items():
                guest = await lifecycle.uow.guest_repo.get_by_id(guest_id=ids[payee])
                guest.payer_id = ids[payer]
                await lifecycle.save_guest(guest=guest)

        await self.runner.run(operation='test_party', actor=None, mutation=mutation)
        return ids


@pytest.fixture
def gala(mutation_runner: MutationRunner) -> GalaBuilder:
    return GalaBuilder(mutation_runner)


@pytest.fixture
def load_guests(uow_factory: Callable[[], AbstractUnitOfWork]):
    """Current stored state of the given guests, in argument order."""

    async def _load(*guest_ids: int) -> List[Guest]:
        async with uow_factory() as uow:
            return [await uow.guest_repo.get_by_id(guest_id=gid) for gid in guest_ids]

    return _load
