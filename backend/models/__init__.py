# backend/models/__init__.py
from .user_model import User
from .product_model import Product, ProductImage
from .order_model import Order, OrderItem
