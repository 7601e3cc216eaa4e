"""
Eligibility Service Factory

Factory functions for creating service instances with real dependencies.
This is the ONLY place that builds I/O-backed collaborators.

Usage:
    from .factory import create_eligibility_service
    service, router = create_eligibility_service(config)
"""
import logging
from typing import Optional, Tuple

from core.config import EligibilityConfig, get_eligibility_config

from .clients import CommerceOrderClient, LocalDirectoryTransport, SftpTransport
from .eligibility_service import EligibilityService
from .events import OrderEventRouter
from .extract_encoder import ExtractEncoder
from .ledger_repository import FileLedgerStorage, LedgerRepository
from .protocols import TransportProtocol
from .record_normalizer import RecordNormalizer

logger = logging.getLogger(__name__)


def create_transport(config: EligibilityConfig) -> TransportProtocol:
    """SFTP in production, an outbox directory when TRANSPORT=local"""
    if config.transport == "local":
        return LocalDirectoryTransport(config.local_outbox_dir)
    return SftpTransport(
        host=config.sftp_host,
        port=config.sftp_port,
        username=config.sftp_user,
        password=config.sftp_password,
        remote_dir=config.sftp_remote_dir,
        known_hosts=config.sftp_known_hosts or None,
        verify_host_key=config.sftp_verify_host_key,
    )


def create_eligibility_service(
    config: Optional[EligibilityConfig] = None,
) -> Tuple[EligibilityService, OrderEventRouter]:
    """
    Create EligibilityService and its order event router with real dependencies.

    Use this in production, NOT in tests.

    Args:
        config: Eligibility configuration (global settings when omitted)

    Returns:
        (service, router) pair sharing one ledger
    """
    config = config or get_eligibility_config()

    ledger = LedgerRepository(FileLedgerStorage(config.ledger_path))
    normalizer = RecordNormalizer(
        plan_prices=config.plan_prices,
        group_code=config.group_code,
        coverage_code=config.coverage_code,
    )
    service = EligibilityService(
        ledger=ledger,
        normalizer=normalizer,
        encoder=ExtractEncoder(config.extract_dir),
        transport=create_transport(config),
        parent_group_code=config.parent_group_code,
        sdf_group_code=config.sdf_group_code,
    )

    order_client = CommerceOrderClient(
        base_url=config.commerce_api_url,
        api_key=config.commerce_api_key,
        user_agent=config.user_agent,
        timeout=config.commerce_timeout,
    )
    router = OrderEventRouter(
        eligibility_service=service,
        order_lookup=order_client,
        test_order_sentinel=config.test_order_sentinel,
        test_orders_enabled=config.test_orders_enabled,
    )

    logger.info("EligibilityService created with real dependencies")
    return service, router


__all__ = ["create_eligibility_service", "create_transport"]
