"""
Eligibility Microservice API

Responsibilities:
- Commerce order webhooks (create, fulfill, cancel) into the subscription ledger
- Pipe-delimited eligibility extract regenerated and delivered on every change
- Daily fixed-width extract of active subscribers
"""

import os
import sys
from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Query, status

# Add parent directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))
from core.config import get_eligibility_config
from core.logger import setup_service_logger

from .eligibility_service import EligibilityService
from .events import OrderEventRouter
from .factory import create_eligibility_service
from .models import (
    EventOutcome,
    ExtractMode,
    ExtractResult,
    HealthResponse,
    MemberListResponse,
    MemberRecord,
    OrderWebhookEvent,
)
from .protocols import InvalidEventError, LedgerPersistenceError, OrderLookupError

SERVICE_VERSION = "1.0.0"

# Initialize configuration
config = get_eligibility_config()

# Configure logger
logger = setup_service_logger("eligibility_service", level=config.log_level)

# Global variables
eligibility_service: Optional[EligibilityService] = None
event_router: Optional[OrderEventRouter] = None
scheduler = None  # APScheduler for the daily fixed-width extract


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle management"""
    global eligibility_service, event_router, scheduler

    try:
        eligibility_service, event_router = create_eligibility_service(config)
        await eligibility_service.initialize()

        if config.sdf_schedule_enabled:
            try:
                from apscheduler.schedulers.asyncio import AsyncIOScheduler

                scheduler = AsyncIOScheduler()
                scheduler.add_job(
                    eligibility_service.run_daily_subscription_extract,
                    'cron',
                    hour=config.sdf_schedule_hour,
                    minute=config.sdf_schedule_minute,
                    id='subscription_sdf_job',
                    replace_existing=True,
                )
                scheduler.start()
                logger.info(
                    f"Subscription SDF scheduler started (daily at "
                    f"{config.sdf_schedule_hour:02d}:{config.sdf_schedule_minute:02d})"
                )
            except Exception as e:
                logger.warning(f"Failed to start SDF scheduler: {e}")
                scheduler = None

        logger.info(f"Eligibility service started on port {config.service_port}")
        yield

    except Exception as e:
        logger.error(f"Failed to initialize eligibility service: {e}")
        raise
    finally:
        if scheduler:
            scheduler.shutdown(wait=False)
            logger.info("SDF scheduler stopped")

        if eligibility_service:
            await eligibility_service.shutdown()

        if event_router:
            close = getattr(event_router.order_lookup, "close", None)
            if close:
                await close()
            logger.info("Commerce client closed")


# Create FastAPI application
app = FastAPI(
    title="Eligibility Service",
    description="Subscription ledger and benefits eligibility extracts",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)


# ====================
# Dependency Injection
# ====================

def get_eligibility_service() -> EligibilityService:
    """Get eligibility service instance"""
    if not eligibility_service:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Eligibility service not initialized",
        )
    return eligibility_service


def get_event_router() -> OrderEventRouter:
    """Get order event router instance"""
    if not event_router:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Eligibility service not initialized",
        )
    return event_router


# ====================
# Health Endpoints
# ====================

@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Service health check"""
    return HealthResponse(
        status="healthy" if eligibility_service else "starting",
        service=config.service_name,
        port=config.service_port,
        version=SERVICE_VERSION,
        timestamp=datetime.utcnow().isoformat(),
        ledger_records=eligibility_service.ledger.count() if eligibility_service else 0,
    )


# ====================
# Webhook Endpoint
# ====================

@app.post("/webhook/squarespace", response_model=EventOutcome)
async def order_webhook(
    event: OrderWebhookEvent,
    router: OrderEventRouter = Depends(get_event_router),
):
    """Commerce order notification: create/fulfill upserts, cancel removes"""
    logger.debug(f"Webhook received: {event.model_dump_json(by_alias=True)}")
    try:
        return await router.route(event)
    except InvalidEventError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except OrderLookupError as e:
        if e.not_found:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    except LedgerPersistenceError as e:
        logger.error(f"Webhook processing failed: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


# ====================
# Ledger Endpoints
# ====================

@app.get("/api/v1/eligibility/members", response_model=MemberListResponse)
async def list_members(
    active_only: bool = Query(False, description="Only subscribers whose next due date has not passed"),
    service: EligibilityService = Depends(get_eligibility_service),
):
    """Ledger snapshot"""
    return service.list_members(active_only=active_only)


@app.get("/api/v1/eligibility/members/{email}", response_model=MemberRecord)
async def get_member(
    email: str,
    service: EligibilityService = Depends(get_eligibility_service),
):
    """Get ledger record by email"""
    record = service.get_member(email)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No subscription for {email}")
    return record


# ====================
# Extract Endpoints
# ====================

@app.post("/api/v1/eligibility/extracts/eligibility", response_model=ExtractResult)
async def generate_eligibility_extract(
    mode: ExtractMode = Query(ExtractMode.FULL, description="full: whole ledger, delta: listed emails"),
    emails: Optional[List[str]] = Query(None, description="Members for a delta extract"),
    service: EligibilityService = Depends(get_eligibility_service),
):
    """Regenerate and deliver the eligibility file"""
    return await service.regenerate_eligibility_extract(mode=mode, emails=emails)


@app.post("/api/v1/eligibility/extracts/subscriptions", response_model=ExtractResult)
async def generate_subscription_extract(
    service: EligibilityService = Depends(get_eligibility_service),
):
    """Run the fixed-width extract job now"""
    return await service.run_daily_subscription_extract()


@app.post("/api/v1/eligibility/extracts/test", response_model=ExtractResult)
async def generate_test_extract(
    service: EligibilityService = Depends(get_eligibility_service),
):
    """Eligibility file for a fixed sample member"""
    return await service.generate_test_extract()


if __name__ == "__main__":
    uvicorn.run(
        "microservices.eligibility_service.main:app",
        host=config.service_host,
        port=config.service_port,
        reload=config.debug,
        log_level=config.log_level.lower(),
    )
