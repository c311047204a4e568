"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.db_setting import Database
from src.platform.database.serial_gate import SerialTransactionGate
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.gala.app.service.mutation_runner import MutationRunner
from src.service.gala.driven_adapter.broadcaster.journal_broadcaster_impl import (
    JournalBroadcasterImpl,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (uses AsyncEngineManager with settings from config_service)
    database = providers.Singleton(Database)

    # One writer at a time, process-wide
    serial_gate = providers.Singleton(SerialTransactionGate)

    # New unit of work per transaction; repositories share its session
    unit_of_work = providers.Factory(SqlAlchemyUnitOfWork, session_factory=database.provided.session)

    # Fan-out loop (started by main.py lifespan)
    journal_broadcaster = providers.Singleton(JournalBroadcasterImpl)

    mutation_runner = providers.Singleton(
        MutationRunner,
        gate=serial_gate,
        uow_factory=unit_of_work.provider,
        broadcaster=journal_broadcaster,
    )


container = Container()
