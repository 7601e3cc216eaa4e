"""
Eligibility Service

Business logic for the subscription ledger and partner extracts.

All ledger mutations, and the extract generation and delivery that follow
them, run under one asyncio.Lock so overlapping webhook requests and the
daily job cannot interleave load/upsert/save sequences.
"""

import asyncio
import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from .activity import is_active
from .extract_encoder import ExtractEncoder
from .models import (
    EventAction,
    EventOutcome,
    ExtractMode,
    ExtractResult,
    MemberListResponse,
    MemberRecord,
    MemberView,
    SubscriptionPlan,
)
from .protocols import LedgerPersistenceError, LedgerRepositoryProtocol, TransportProtocol
from .record_normalizer import RecordNormalizer

logger = logging.getLogger(__name__)

TEST_GROUP_CODE = "TESTGRP"


class EligibilityService:
    """Subscription ledger + extract generation"""

    def __init__(
        self,
        ledger: LedgerRepositoryProtocol,
        normalizer: RecordNormalizer,
        encoder: ExtractEncoder,
        transport: Optional[TransportProtocol] = None,
        parent_group_code: str = "",
        sdf_group_code: str = "SHAREING",
    ):
        """
        Initialize eligibility service with injected dependencies

        Args:
            ledger: Subscription ledger
            normalizer: Order -> MemberRecord mapping
            encoder: Extract file writer
            transport: Delivers extract files; files are only written locally when None
            parent_group_code: Prefix of eligibility file names
            sdf_group_code: Prefix of fixed-width file names
        """
        self.ledger = ledger
        self.normalizer = normalizer
        self.encoder = encoder
        self.transport = transport
        self.parent_group_code = parent_group_code
        self.sdf_group_code = sdf_group_code
        self._lock = asyncio.Lock()

        logger.info("EligibilityService initialized with dependency injection")

    async def initialize(self):
        """Load the ledger from durable storage"""
        self.ledger.load()
        logger.info(f"EligibilityService initialized with {self.ledger.count()} records")

    async def shutdown(self):
        """Final ledger flush"""
        async with self._lock:
            try:
                self.ledger.flush()
                logger.info("Ledger flushed on shutdown")
            except LedgerPersistenceError as e:
                logger.error(f"Final ledger flush failed: {e}")

    # ====================
    # Order events
    # ====================

    async def record_order(
        self,
        order: Dict[str, Any],
        action: EventAction = EventAction.CREATED,
        diagnostic: bool = False,
    ) -> EventOutcome:
        """Normalize a created/fulfilled order and upsert it"""
        order_id = str(order.get("id", ""))
        record = self.normalizer.normalize(order)
        if record is None:
            return EventOutcome(
                action=action,
                order_id=order_id,
                email=order.get("customerEmail"),
                message="No recognized subscription in order, ledger unchanged",
            )

        if diagnostic:
            logger.info(f"Diagnostic order {order_id} normalized for {record.email}, ledger unchanged")
            return EventOutcome(
                action=action,
                order_id=order_id,
                email=record.email,
                record=record,
                message="Diagnostic order, ledger unchanged",
            )

        async with self._lock:
            self.ledger.upsert(record)
            extract = await self._publish_eligibility_extract(self.ledger.all(), ExtractMode.FULL)

        return EventOutcome(
            action=action,
            order_id=order_id,
            email=record.email,
            record=record,
            extract=extract,
            message="Eligibility file updated",
        )

    async def cancel_order(
        self,
        order: Dict[str, Any],
        action: EventAction = EventAction.CANCELED,
        diagnostic: bool = False,
    ) -> EventOutcome:
        """Remove the canceled order's subscriber and regenerate the extract"""
        order_id = str(order.get("id", ""))
        email = str(order.get("customerEmail") or "").strip()

        if diagnostic:
            return EventOutcome(
                action=action,
                order_id=order_id,
                email=email or None,
                message="Diagnostic order, ledger unchanged",
            )

        async with self._lock:
            removed = self.ledger.remove(email) if email else None
            extract = await self._publish_eligibility_extract(self.ledger.all(), ExtractMode.FULL)

        return EventOutcome(
            action=action,
            order_id=order_id,
            email=email or None,
            record=removed,
            extract=extract,
            message="Eligibility file updated" if removed else "No subscription on record, eligibility file regenerated",
        )

    # ====================
    # Extracts
    # ====================

    async def regenerate_eligibility_extract(
        self,
        mode: ExtractMode = ExtractMode.FULL,
        emails: Optional[Iterable[str]] = None,
    ) -> ExtractResult:
        """
        Write and deliver an eligibility file.

        Full mode emits the whole ledger; delta mode emits only the records
        for `emails` that are still in the ledger.
        """
        async with self._lock:
            if mode == ExtractMode.FULL:
                records = self.ledger.all()
            else:
                records = [r for r in (self.ledger.get(e) for e in emails or []) if r]
            return await self._publish_eligibility_extract(records, mode)

    async def run_daily_subscription_extract(self, today: Optional[date] = None) -> ExtractResult:
        """Write and deliver the fixed-width file of active subscribers"""
        logger.info("Running daily subscription status check and SDF file generation")
        async with self._lock:
            path, count = self.encoder.write_subscription_file(
                self.ledger.all(), self.sdf_group_code, today=today
            )
            delivered = await self._deliver(path)
        return ExtractResult(
            file_name=path.name,
            file_path=str(path),
            record_count=count,
            mode=ExtractMode.FULL,
            delivered=delivered,
        )

    async def generate_test_extract(self, today: Optional[date] = None) -> ExtractResult:
        """Eligibility file for one fixed sample member, independent of the ledger"""
        today = today or date.today()
        member = MemberRecord(
            email="test.user@example.com",
            order_id="test-order-id",
            title="Mr",
            first_name="Test",
            last_name="User",
            address1="123 Test St",
            city="Testville",
            state="TS",
            zip="12345",
            home_phone="5551234567",
            subscription_plan=SubscriptionPlan.MONTHLY,
            payment_amount="19.99",
            last_payment_date=today,
            next_due_date=today,
            coverage=self.normalizer.coverage_code,
            group_code=TEST_GROUP_CODE,
            effective_date=today,
            date_of_birth=date(1990, 1, 1),
            gender="M",
        )
        path, count = self.encoder.write_eligibility_file(
            [member], TEST_GROUP_CODE, ExtractMode.FULL, generated_on=today
        )
        delivered = await self._deliver(path)
        return ExtractResult(
            file_name=path.name, file_path=str(path), record_count=count, delivered=delivered
        )

    async def _publish_eligibility_extract(
        self, records: List[MemberRecord], mode: ExtractMode
    ) -> ExtractResult:
        path, count = self.encoder.write_eligibility_file(records, self.parent_group_code, mode)
        delivered = await self._deliver(path)
        return ExtractResult(
            file_name=path.name,
            file_path=str(path),
            record_count=count,
            mode=mode,
            delivered=delivered,
        )

    async def _deliver(self, path) -> bool:
        if self.transport is None:
            logger.info(f"No transport configured, {path.name} kept locally")
            return False
        try:
            delivered = await self.transport.deliver(path, path.name)
        except Exception as e:
            logger.error(f"Delivery of {path.name} failed: {e}", exc_info=True)
            return False
        if not delivered:
            logger.error(f"Delivery of {path.name} failed")
        return delivered

    # ====================
    # Queries
    # ====================

    def list_members(self, active_only: bool = False, today: Optional[date] = None) -> MemberListResponse:
        today = today or date.today()
        views = [MemberView(record=r, active=is_active(r, today)) for r in self.ledger.all()]
        active_count = sum(1 for v in views if v.active)
        if active_only:
            views = [v for v in views if v.active]
        return MemberListResponse(members=views, total=self.ledger.count(), active_count=active_count)

    def get_member(self, email: str) -> Optional[MemberRecord]:
        return self.ledger.get(email)

    async def health_check(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "ledger_records": self.ledger.count(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


__all__ = ["EligibilityService", "TEST_GROUP_CODE"]
