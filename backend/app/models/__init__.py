from .auth import User
from .catalog import Category, Product
from .inventory import InventoryMovement, LedgerSequence
from .rentals import Supplier, Rental

__all__ = [
    'User',
    'Category', 'Product',
    'InventoryMovement', 'LedgerSequence',
    'Supplier', 'Rental',
]
