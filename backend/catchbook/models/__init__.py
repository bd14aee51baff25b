from catchbook.models.user import User
from catchbook.models.shipment import Shipment
from catchbook.models.expense import Expense
from catchbook.models.inventory import InventoryItem
from catchbook.models.document import Document
from catchbook.models.grant import Grant

__all__ = ["User", "Shipment", "Expense", "InventoryItem", "Document", "Grant"]
