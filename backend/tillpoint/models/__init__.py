from .auth import User, USER_ROLES
from .catalog import Category, Product
from .payments import Payment, PAYMENT_TYPES
from .orders import Order, OrderLine

__all__ = [
    'User', 'USER_ROLES',
    'Category', 'Product',
    'Payment', 'PAYMENT_TYPES',
    'Order', 'OrderLine',
]
