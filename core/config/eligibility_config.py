#!/usr/bin/env python3
"""Eligibility service configuration

Partner group codes, recognized plan prices, ledger/extract locations,
commerce API access, file transport and the daily extract schedule.
"""
import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from .logging_config import LoggingConfig


def _bool(val: str) -> bool:
    return val.lower() == "true"

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default

def _float(val: str, default: float) -> float:
    try:
        return float(val) if val else default
    except ValueError:
        return default


DEFAULT_PLAN_PRICES = "19.99:Monthly,159.00:Annual"


def parse_plan_prices(raw: str) -> Dict[str, str]:
    """Parse `amount:Plan,amount:Plan` into an exact-match price table"""
    prices: Dict[str, str] = {}
    for entry in raw.split(","):
        if ":" not in entry:
            continue
        amount, plan = entry.split(":", 1)
        if amount.strip() and plan.strip():
            prices[amount.strip()] = plan.strip()
    return prices


@dataclass
class EligibilityConfig:
    """Eligibility service settings"""

    # ===========================================
    # Service
    # ===========================================
    service_name: str = "eligibility_service"
    service_host: str = "0.0.0.0"
    service_port: int = 8260
    debug: bool = False
    log_level: str = "INFO"

    # ===========================================
    # Ledger + extracts (local disk)
    # ===========================================
    ledger_path: str = "data/subscriptions.json"
    extract_dir: str = "data/extracts"

    # ===========================================
    # Benefits partner
    # ===========================================
    parent_group_code: str = ""
    group_code: str = ""
    sdf_group_code: str = "SHAREING"
    coverage_code: str = "MO"
    plan_prices: Dict[str, str] = field(
        default_factory=lambda: parse_plan_prices(DEFAULT_PLAN_PRICES)
    )

    # ===========================================
    # Commerce platform API
    # ===========================================
    commerce_api_url: str = "https://api.squarespace.com/1.0"
    commerce_api_key: Optional[str] = None
    user_agent: str = "eligibility-service"
    commerce_timeout: float = 30.0

    # ===========================================
    # File transport
    # ===========================================
    transport: str = "sftp"
    sftp_host: str = "localhost"
    sftp_port: int = 22
    sftp_user: Optional[str] = None
    sftp_password: Optional[str] = None
    sftp_remote_dir: str = ""
    sftp_known_hosts: str = ""
    sftp_verify_host_key: bool = True
    local_outbox_dir: str = "data/outbox"

    # ===========================================
    # Daily fixed-width extract
    # ===========================================
    sdf_schedule_enabled: bool = True
    sdf_schedule_hour: int = 0
    sdf_schedule_minute: int = 0

    # ===========================================
    # Diagnostics
    # ===========================================
    test_order_sentinel: str = "test-order-id"
    test_orders_enabled: bool = False

    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> 'EligibilityConfig':
        """Load eligibility config from environment"""
        logging_config = LoggingConfig.from_env()
        group_code = os.getenv("CAREINGTON_GROUP_CODE", "")
        return cls(
            # Service
            service_name=os.getenv("SERVICE_NAME", "eligibility_service"),
            service_host=os.getenv("SERVICE_HOST", "0.0.0.0"),
            service_port=_int(os.getenv("PORT") or os.getenv("SERVICE_PORT", "8260"), 8260),
            debug=_bool(os.getenv("DEBUG", "false")),
            log_level=logging_config.log_level,

            # Ledger + extracts
            ledger_path=os.getenv("LEDGER_PATH", "data/subscriptions.json"),
            extract_dir=os.getenv("EXTRACT_DIR", "data/extracts"),

            # Partner
            parent_group_code=os.getenv("CAREINGTON_PARENT_GROUP_CODE", group_code),
            group_code=group_code,
            sdf_group_code=os.getenv("SHAREINGTON_GROUP_CODE", "SHAREING"),
            coverage_code=os.getenv("COVERAGE_CODE", "MO"),
            plan_prices=parse_plan_prices(os.getenv("PLAN_PRICES", DEFAULT_PLAN_PRICES)),

            # Commerce API
            commerce_api_url=os.getenv("COMMERCE_API_URL", "https://api.squarespace.com/1.0"),
            commerce_api_key=os.getenv("API_KEY"),
            user_agent=os.getenv("USER_AGENT", "eligibility-service"),
            commerce_timeout=_float(os.getenv("COMMERCE_TIMEOUT", "30"), 30.0),

            # Transport
            transport=os.getenv("TRANSPORT", "sftp").lower(),
            sftp_host=os.getenv("SFTP_HOST", "localhost"),
            sftp_port=_int(os.getenv("SFTP_PORT", "22"), 22),
            sftp_user=os.getenv("SFTP_USER"),
            sftp_password=os.getenv("SFTP_PASS"),
            sftp_remote_dir=os.getenv("SFTP_REMOTE_DIR", ""),
            sftp_known_hosts=os.getenv("SFTP_KNOWN_HOSTS", ""),
            sftp_verify_host_key=_bool(os.getenv("SFTP_VERIFY_HOST_KEY", "true")),
            local_outbox_dir=os.getenv("LOCAL_OUTBOX_DIR", "data/outbox"),

            # Schedule
            sdf_schedule_enabled=_bool(os.getenv("SDF_SCHEDULE_ENABLED", "true")),
            sdf_schedule_hour=_int(os.getenv("SDF_SCHEDULE_HOUR", "0"), 0),
            sdf_schedule_minute=_int(os.getenv("SDF_SCHEDULE_MINUTE", "0"), 0),

            # Diagnostics
            test_order_sentinel=os.getenv("TEST_ORDER_SENTINEL", "test-order-id"),
            test_orders_enabled=_bool(os.getenv("TEST_ORDERS_ENABLED", "false")),

            logging=logging_config,
        )
