"""
Eligibility Service Data Models

Member records kept in the subscription ledger, the inbound order webhook
shape, and API response models.
"""

from enum import Enum
from typing import Optional, Dict, Any, List
from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ====================
# Enum Types
# ====================

class SubscriptionPlan(str, Enum):
    """Paid plan interval"""
    MONTHLY = "Monthly"
    ANNUAL = "Annual"


class EventAction(str, Enum):
    """Outcome classification of an inbound order event"""
    CREATED = "created"
    FULFILLED = "fulfilled"
    CANCELED = "canceled"
    IGNORED = "ignored"


class ExtractMode(str, Enum):
    """Eligibility file suffix"""
    FULL = "full"
    DELTA = "delta"


# ====================
# Core Data Models
# ====================

class MemberRecord(BaseModel):
    """
    One subscriber in the ledger, keyed by email.

    Serialized with camelCase keys, which is also the on-disk ledger layout.
    Optional text fields are empty strings, never None.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Identity
    email: str = Field(..., min_length=1)
    order_id: str
    first_name: str = ""
    last_name: str = ""
    title: str = ""
    middle_name: str = ""
    post_name: str = ""

    # Address
    address1: str = ""
    address2: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    plus4: str = ""

    # Contact
    home_phone: str = ""
    work_phone: str = ""

    # Plan
    subscription_plan: SubscriptionPlan
    payment_amount: str
    last_payment_date: date
    next_due_date: date
    product_name: str = ""

    # Partner eligibility fields
    coverage: str = ""
    group_code: str = ""
    effective_date: date
    termination_date: Optional[date] = None
    date_of_birth: Optional[date] = None
    gender: str = ""
    relation: str = ""
    student_status: str = ""
    sequence_num: str = "00"

    def to_storage(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys"""
        return self.model_dump(mode="json", by_alias=True)


# ====================
# Inbound Webhook
# ====================

class OrderWebhookData(BaseModel):
    """`data` block of a commerce order notification"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    order_id: Optional[str] = Field(None, alias="orderId")
    update: Optional[str] = None
    customer: Optional[Dict[str, Any]] = None


class OrderWebhookEvent(BaseModel):
    """Commerce order notification: {topic, createdOn, data}"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    topic: str = ""
    created_on: Optional[datetime] = Field(None, alias="createdOn")
    data: Optional[OrderWebhookData] = None


# ====================
# Results / Responses
# ====================

class ExtractResult(BaseModel):
    """A generated extract file and its delivery status"""
    file_name: str
    file_path: str
    record_count: int = 0
    mode: ExtractMode = ExtractMode.FULL
    delivered: bool = False


class EventOutcome(BaseModel):
    """Result of routing one order event"""
    success: bool = True
    action: EventAction
    message: str = ""
    order_id: Optional[str] = None
    email: Optional[str] = None
    record: Optional[MemberRecord] = None
    extract: Optional[ExtractResult] = None


class MemberView(BaseModel):
    """Ledger record with its current activity state"""
    record: MemberRecord
    active: bool


class MemberListResponse(BaseModel):
    """Ledger snapshot"""
    members: List[MemberView] = Field(default_factory=list)
    total: int = 0
    active_count: int = 0


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    service: str
    port: int
    version: str
    timestamp: str
    ledger_records: int = 0
