"""
Declarative base shared by all ORM models of the Opportunity Scanner service.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
