from .base import Base
from .customer import Customer, PushToken

__all__ = [
    "Base",
    "Customer",
    "PushToken",
]
