"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.gala.driven_adapter.model.guest_model import GuestModel
from src.service.gala.driven_adapter.model.item_model import ItemModel
from src.service.gala.driven_adapter.model.journal_model import JournalModel
from src.service.gala.driven_adapter.model.party_model import PartyModel
from src.service.gala.driven_adapter.model.purchase_model import PurchaseModel
from src.service.gala.driven_adapter.model.table_model import TableModel

__all__ = [
    'GuestModel',
    'ItemModel',
    'JournalModel',
    'PartyModel',
    'PurchaseModel',
    'TableModel',
]
