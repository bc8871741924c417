from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import JSON, DateTime, Index, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class CompanyRole(str, Enum):
    VENDOR = 'vendor'
    CLIENT = 'client'


class QuoteDirection(str, Enum):
    RECEIVED = 'received'
    SENT = 'sent'


class QuoteStatus(str, Enum):
    DRAFT = 'Draft'
    ACTIVE = 'Active'
    CLOSED = 'Closed'
    LOST = 'Lost'


class TaskStatus(str, Enum):
    PENDING = 'Pending'
    COMPLETED = 'Completed'


class PaymentStatus(str, Enum):
    PENDING = 'Pending'
    PAID = 'Paid'


class SortDirection(str, Enum):
    ASC = 'asc'
    DESC = 'desc'


class Collection(str, Enum):
    VENDORS = 'vendors'
    CLIENTS = 'clients'
    PRODUCTS = 'products'
    SKUS = 'skus'
    QUOTES_RECEIVED = 'quotesReceived'
    QUOTES_SENT = 'quotesSent'
    TASKS = 'tasks'
    ORDERS = 'orders'
    CONTACTS = 'contacts'
    SETTINGS = 'settings'


COMPANY_COLLECTIONS = {
    CompanyRole.VENDOR: Collection.VENDORS,
    CompanyRole.CLIENT: Collection.CLIENTS,
}

QUOTE_COLLECTIONS = {
    QuoteDirection.RECEIVED: Collection.QUOTES_RECEIVED,
    QuoteDirection.SENT: Collection.QUOTES_SENT,
}


def quote_direction_for(role: CompanyRole) -> QuoteDirection:
    # Vendors send us purchase quotes; we send sales quotes to clients.
    return QuoteDirection.RECEIVED if role == CompanyRole.VENDOR else QuoteDirection.SENT


class StoredDocument(Base):
    __tablename__ = 'documents'
    __table_args__ = (Index('ix_documents_collection_created', 'collection', 'created_at'),)

    collection: Mapped[str] = mapped_column(Text, primary_key=True)
    id: Mapped[str] = mapped_column(Text, primary_key=True)
    data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
