import logging
import uuid

from fastapi import APIRouter, Depends, Request

from ace.core.container import Services
from ace.observability.logger import log_event, timing
from ace.routes.deps import get_services, require_api_key_if_configured
from ace.schemas.requests import EnrichRequest, EnrichResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/enrich-person", response_model=EnrichResponse)
def enrich_person(request: Request, body: EnrichRequest, services: Services = Depends(get_services)):
    """Resolve a person and their company from open web search."""
    require_api_key_if_configured(request)

    request_id = str(uuid.uuid4())
    logger.info(f"[{request_id}] Received enrich request for: {body.email}")

    with timing("enrich_person") as timer:
        result = services.enrichment.process_enrichment(name=body.name, email=str(body.email))

    if result.company_name:
        logger.info(f"[{request_id}] -> Company: {result.company_name}")

    log_event(
        action="enriched",
        component="enrichment",
        duration_ms=timer.get_duration_ms(),
        request_id=request_id,
        company_found=result.company_name is not None,
        profile_found=result.linkedin_url is not None,
    )

    return EnrichResponse(
        company_name=result.company_name,
        research_summary=result.research_summary,
        request_id=request_id,
        linkedin_title=result.linkedin_title,
        linkedin_url=result.linkedin_url,
    )
