# backend/backoffice/core/statuses.py
# Stored as plain strings in the DB; these enums are the canonical spellings.

import enum


class PaymentStatus(str, enum.Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    DELETED = "Deleted"  # soft delete; invisible to every lifecycle operation


class SaleStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


class AgentStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class VatClass(str, enum.Enum):
    VATABLE = "Vatable"
    NON_VAT = "Non Vat"


class DueDate(str, enum.Enum):
    FIFTEENTH = "15th"
    THIRTIETH = "30th"


class ReceiptKind(str, enum.Enum):
    PAYER = "payer"
    ACKNOWLEDGMENT = "acknowledgment"
