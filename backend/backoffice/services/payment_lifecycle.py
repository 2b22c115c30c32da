# backoffice/services/payment_lifecycle.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, Optional

from backoffice.core.config import settings
from backoffice.core.errors import BackofficeError, InvalidTransition, NotFound, StoreError, ValidationError
from backoffice.core.receipt_paths import ack_receipt_path, file_extension, payer_receipt_path
from backoffice.core.statuses import DueDate, PaymentStatus, ReceiptKind, VatClass
from backoffice.crud.record_store import RecordStore
from backoffice.models.payment import Payment
from backoffice.schemas.payment import PaymentDraft, PaymentEdit, PaymentFilters
from backoffice.services.balances import list_client_balances
from backoffice.storage.receipt_store import ReceiptStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReceiptFile:
    filename: str
    content: bytes
    content_type: Optional[str] = None


@dataclass(frozen=True)
class PaymentPage:
    items: list[Payment]
    page: int
    page_size: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _required_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(field, f"{field} is required.")
    return value.strip()


def _positive_amount(value: Optional[Decimal], field: str) -> Decimal:
    if value is None:
        raise ValidationError(field, f"{field} is required.")
    if value <= 0:
        raise ValidationError(field, f"{field} must be greater than zero.")
    return value


def _non_negative_amount(value: Optional[Decimal], field: str) -> Optional[Decimal]:
    if value is not None and value < 0:
        raise ValidationError(field, f"{field} cannot be negative.")
    return value


def _choice(value: Optional[str], allowed: Iterable[Any], field: str) -> str:
    options = [item.value for item in allowed]
    if value is None or value not in options:
        raise ValidationError(field, f"{field} must be one of: {', '.join(options)}.")
    return value


def normalize_period(value, field: str = "payment_period") -> date:
    """
    A payment period is a calendar month, stored as its first day.
    Accepts a date/datetime, "YYYY-MM" or "YYYY-MM-DD".
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(field, f"{field} is required.")
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.replace(day=1)

    text = str(value).strip()
    try:
        if len(text) == 7:
            year, month = text.split("-")
            return date(int(year), int(month), 1)
        return date.fromisoformat(text).replace(day=1)
    except ValueError as exc:
        raise ValidationError(field, f"{field} must be a month such as 2026-10.") from exc


class PaymentLifecycleManager:
    """
    Owns the Payment state machine and the two-receipt upload protocol.

        Pending --approve--> Approved --attach ack receipt--> Approved (+ack)
        Pending --reject---> Rejected (terminal)

    Every status write is version-checked, so two admins acting on the same
    payment cannot both succeed. Deleted payments behave as if absent.
    """

    def __init__(
        self,
        records: RecordStore,
        receipts: ReceiptStore,
        *,
        payer_bucket: str | None = None,
        ack_bucket: str | None = None,
        page_size: int | None = None,
        max_receipt_bytes: int | None = None,
        allowed_extensions: Iterable[str] | None = None,
    ) -> None:
        self.records = records
        self.receipts = receipts
        self.payer_bucket = payer_bucket or settings.PAYER_RECEIPT_BUCKET
        self.ack_bucket = ack_bucket or settings.ACK_RECEIPT_BUCKET
        self.page_size = page_size or settings.PAYMENT_PAGE_SIZE
        self.max_receipt_bytes = max_receipt_bytes or settings.MAX_RECEIPT_BYTES
        self.allowed_extensions = {
            ext.lower() for ext in (allowed_extensions or settings.ALLOWED_RECEIPT_EXTENSIONS)
        }

    # -----------------------------
    # Helpers
    # -----------------------------
    def _check_receipt(self, receipt: Optional[ReceiptFile], field: str) -> ReceiptFile:
        if receipt is None or not receipt.content:
            raise ValidationError(field, "A non-empty receipt file is required.")
        if len(receipt.content) > self.max_receipt_bytes:
            max_mb = self.max_receipt_bytes / (1024 * 1024)
            actual_mb = len(receipt.content) / (1024 * 1024)
            raise ValidationError(field, f"Receipt too large: {actual_mb:.1f}MB. Maximum: {max_mb:.0f}MB")
        ext = file_extension(receipt.filename)
        if ext not in self.allowed_extensions:
            raise ValidationError(
                field,
                f"Invalid receipt type: {ext or 'none'}. Allowed: {', '.join(sorted(self.allowed_extensions))}",
            )
        return receipt

    async def _require_property(self, payer_name: str, project: str, block_lot: str) -> None:
        balances = await list_client_balances(self.records, payer_name, project=project)
        if not any(b.block_lot == block_lot for b in balances):
            raise ValidationError(
                "block_lot",
                f"{block_lot} in {project} is not a property of {payer_name}.",
            )

    async def _discard_receipt(self, bucket: str, path: str) -> None:
        # Compensation for a record write that failed after the blob write.
        try:
            await self.receipts.remove(bucket, path)
        except Exception:
            logger.exception("Could not remove orphaned receipt %s/%s", bucket, path)
        else:
            logger.info("Removed orphaned receipt %s/%s", bucket, path)

    async def get_payment(self, payment_id: int) -> Payment:
        payment = await self.records.get(Payment, payment_id)
        if payment.status == PaymentStatus.DELETED.value:
            raise NotFound(f"Payment {payment_id} not found", id=payment_id)
        return payment

    async def _transition_from_pending(self, payment_id: int, action: str, target: PaymentStatus) -> Payment:
        payment = await self.get_payment(payment_id)
        previous = payment.status
        if previous != PaymentStatus.PENDING.value:
            raise InvalidTransition(action, previous)

        updated = await self.records.update_by_id(
            Payment,
            payment_id,
            {"status": target.value},
            expected_version=payment.version,
            action=action,
        )
        logger.info("Payment %s %s (was %s)", payment_id, target.value, previous)
        return updated

    # -----------------------------
    # Operations
    # -----------------------------
    async def submit_payment(self, draft: PaymentDraft, receipt: Optional[ReceiptFile]) -> Payment:
        """
        Validate, store the payer receipt, then insert a Pending payment.

        If the insert fails the uploaded receipt is removed again (best effort)
        and the original StoreError propagates.
        """
        receipt = self._check_receipt(receipt, "receipt")
        payer_name = _required_text(draft.payer_name, "payer_name")
        project = _required_text(draft.project, "project")
        block_lot = _required_text(draft.block_lot, "block_lot")
        amount = _positive_amount(draft.amount, "amount")
        penalty = _non_negative_amount(draft.penalty_amount, "penalty_amount")
        if draft.payment_date is None:
            raise ValidationError("payment_date", "payment_date is required.")
        period = normalize_period(draft.payment_period)
        due_date = _choice(draft.due_date, DueDate, "due_date")
        reference_number = _required_text(draft.reference_number, "reference_number")
        vat = _choice(draft.vat or VatClass.NON_VAT.value, VatClass, "vat")

        await self._require_property(payer_name, project, block_lot)

        path = payer_receipt_path(
            project=project,
            payer_name=payer_name,
            payment_date=draft.payment_date,
            block_lot=block_lot,
            filename=receipt.filename,
        )
        await self.receipts.upload(
            self.payer_bucket,
            path,
            receipt.content,
            overwrite=True,
            content_type=receipt.content_type,
        )

        payment = Payment(
            payer_name=payer_name,
            project=project,
            block_lot=block_lot,
            amount=amount,
            penalty_amount=penalty,
            due_date=due_date,
            payment_date=draft.payment_date,
            payment_period=period,
            reference_number=reference_number,
            vat=vat,
            status=PaymentStatus.PENDING.value,
            receipt_path=path,
        )
        try:
            payment = await self.records.insert(payment)
        except StoreError:
            await self._discard_receipt(self.payer_bucket, path)
            raise

        logger.info("Payment %s submitted by %s for %s %s", payment.id, payer_name, project, block_lot)
        return payment

    async def approve(self, payment_id: int) -> Payment:
        return await self._transition_from_pending(payment_id, "approve", PaymentStatus.APPROVED)

    async def reject(self, payment_id: int) -> Payment:
        return await self._transition_from_pending(payment_id, "reject", PaymentStatus.REJECTED)

    async def attach_acknowledgment_receipt(self, payment_id: int, receipt: Optional[ReceiptFile]) -> Payment:
        """Only from Approved. Replaces any previous acknowledgment path."""
        receipt = self._check_receipt(receipt, "ack_receipt")
        payment = await self.get_payment(payment_id)
        if payment.status != PaymentStatus.APPROVED.value:
            raise InvalidTransition("attach acknowledgment receipt to", payment.status)

        path = ack_receipt_path(project=payment.project, payer_name=payment.payer_name, filename=receipt.filename)
        await self.receipts.upload(
            self.ack_bucket,
            path,
            receipt.content,
            overwrite=True,
            content_type=receipt.content_type,
        )
        try:
            updated = await self.records.update_by_id(
                Payment,
                payment_id,
                {"ack_receipt_path": path},
                expected_version=payment.version,
                action="attach acknowledgment receipt to",
            )
        except BackofficeError:
            await self._discard_receipt(self.ack_bucket, path)
            raise

        logger.info("Acknowledgment receipt attached to payment %s", payment_id)
        return updated

    async def edit_details(self, payment_id: int, edit: PaymentEdit) -> Payment:
        """Admin correction of a Pending payment. Never changes status."""
        payment = await self.get_payment(payment_id)
        if payment.status != PaymentStatus.PENDING.value:
            raise InvalidTransition("edit", payment.status)

        data = edit.model_dump(exclude_unset=True)
        fields: dict[str, Any] = {}

        if "payer_name" in data:
            fields["payer_name"] = _required_text(data["payer_name"], "payer_name")
        if "amount" in data:
            if data["amount"] is None:
                raise ValidationError("amount", "amount is required.")
            fields["amount"] = _non_negative_amount(data["amount"], "amount")
        if "penalty_amount" in data:
            fields["penalty_amount"] = _non_negative_amount(data["penalty_amount"], "penalty_amount")
        for name in ("project", "block_lot", "reference_number"):
            if name in data:
                fields[name] = _required_text(data[name], name)
        if "payment_date" in data:
            if data["payment_date"] is None:
                raise ValidationError("payment_date", "payment_date is required.")
            fields["payment_date"] = data["payment_date"]
        if "payment_period" in data:
            fields["payment_period"] = normalize_period(data["payment_period"])
        if "due_date" in data:
            fields["due_date"] = _choice(data["due_date"], DueDate, "due_date")
        if "vat" in data:
            fields["vat"] = _choice(data["vat"], VatClass, "vat")

        if not fields:
            return payment

        updated = await self.records.update_by_id(
            Payment,
            payment_id,
            fields,
            expected_version=payment.version,
            action="edit",
        )
        logger.info("Payment %s edited: %s", payment_id, ", ".join(sorted(fields)))
        return updated

    async def delete_payment(self, payment_id: int) -> None:
        """Soft delete from any live state: status Deleted + deleted_at."""
        payment = await self.get_payment(payment_id)
        previous = payment.status
        await self.records.update_by_id(
            Payment,
            payment_id,
            {"status": PaymentStatus.DELETED.value, "deleted_at": _utcnow()},
            expected_version=payment.version,
            action="delete",
        )
        logger.info("Payment %s deleted (was %s)", payment_id, previous)

    async def get_receipt(self, payment_id: int, kind: ReceiptKind = ReceiptKind.PAYER) -> tuple[str, bytes]:
        payment = await self.get_payment(payment_id)
        if kind == ReceiptKind.ACKNOWLEDGMENT:
            bucket, path = self.ack_bucket, payment.ack_receipt_path
        else:
            bucket, path = self.payer_bucket, payment.receipt_path
        if not path:
            raise NotFound(f"Payment {payment_id} has no {kind.value} receipt", id=payment_id)
        return path, await self.receipts.download(bucket, path)

    async def list_payments(self, filters: PaymentFilters | None = None, page: int = 1) -> PaymentPage:
        """
        Conjunctive filters, newest first, fixed page size.
        The total is counted with its own query, independent of the page fetch.
        """
        if page < 1:
            raise ValidationError("page", "page must be 1 or greater.")
        filters = filters or PaymentFilters()

        exact: dict[str, Any] = {}
        if filters.project:
            exact["project"] = filters.project
        if filters.status:
            exact["status"] = filters.status

        extra = [Payment.status != PaymentStatus.DELETED.value]
        if filters.payer_name and filters.payer_name.strip():
            term = filters.payer_name.strip().lower()
            extra.append(Payment.payer_name.icontains(term, autoescape=True))
        if filters.missing_ack_receipt:
            extra.append(Payment.ack_receipt_path.is_(None))

        total = await self.records.count(Payment, exact, extra=extra)
        items = await self.records.query_exact(
            Payment,
            exact,
            extra=extra,
            order_by=(Payment.created_at.desc(), Payment.id.desc()),
            limit=self.page_size,
            offset=(page - 1) * self.page_size,
        )
        return PaymentPage(items=items, page=page, page_size=self.page_size, total=total)

    async def list_client_payments(self, payer_name: str) -> list[Payment]:
        return await self.records.query_exact(
            Payment,
            {"payer_name": payer_name},
            extra=[Payment.status != PaymentStatus.DELETED.value],
            order_by=(Payment.created_at.desc(), Payment.id.desc()),
        )
