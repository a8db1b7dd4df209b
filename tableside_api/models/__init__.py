"""
SQLAlchemy ORM Models Package.

- base: Base class, BigIntPK and AuditMixin
- catalog: Category, Dish
- customization: OptionGroup, Option
- table: Table, TableSession
- cart: Cart
- order: Order, OrderLine
- user: StaffUser
- outbox: OutboxEvent, OutboxStatus
"""

from .base import Base, AuditMixin, BigIntPK, as_utc, utcnow
from .catalog import Category, Dish
from .customization import OptionGroup, Option
from .table import Table, TableSession
from .cart import Cart
from .order import Order, OrderLine
from .user import StaffUser
from .outbox import OutboxEvent, OutboxStatus

__all__ = [
    "Base",
    "AuditMixin",
    "BigIntPK",
    "as_utc",
    "utcnow",
    "Category",
    "Dish",
    "OptionGroup",
    "Option",
    "Table",
    "TableSession",
    "Cart",
    "Order",
    "OrderLine",
    "StaffUser",
    "OutboxEvent",
    "OutboxStatus",
]
