"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.gala.app.command import (
    add_guest_use_case,
    add_purchase_use_case,
    create_item_use_case,
    delete_guest_use_case,
    delete_item_use_case,
    delete_purchase_use_case,
    pickup_purchase_use_case,
    reposition_tables_use_case,
    save_guest_use_case,
    save_item_use_case,
    save_party_use_case,
    save_table_use_case,
)
from src.service.gala.app.query import get_snapshot_use_case
from src.service.gala.driving_adapter.websocket import journal_websocket_handler


WIRE_MODULES: list[ModuleType] = [
    add_guest_use_case,
    save_guest_use_case,
    delete_guest_use_case,
    save_party_use_case,
    save_table_use_case,
    reposition_tables_use_case,
    create_item_use_case,
    save_item_use_case,
    delete_item_use_case,
    add_purchase_use_case,
    delete_purchase_use_case,
    pickup_purchase_use_case,
    get_snapshot_use_case,
    journal_websocket_handler,
]
