"""
API Endpoints for Company Research

FastAPI app exposing:
1. POST /api/profile/deep-research - full research pipeline for onboarding
2. POST /api/profile/quick-research - fill missing fields of an existing profile
3. GET /health - liveness and provider status

Request bodies use camelCase field names.
"""

import logging
import sys
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from src import __version__
from src.integrations.config import ExternalAPIConfig
from src.research import (
    ResearchRequest,
    ResearchValidationError,
    run_deep_research,
    run_quick_research,
)
from src.utils.config import get_settings

# Configure logging to stdout
logging.basicConfig(
    level=getattr(logging, get_settings().LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
    force=True,
)
logger = logging.getLogger(__name__)

# Quiet down chatty loggers
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

app = FastAPI(
    title="Company Research Engine",
    description="AI research pipeline for trade-service company profiles",
    version=__version__,
)


# ============================================================================
# REQUEST MODELS
# ============================================================================

class DeepResearchBody(BaseModel):
    """Deep research request."""
    model_config = ConfigDict(populate_by_name=True)

    website_url: Optional[str] = Field(None, alias="websiteUrl", description="Company website")
    company_name: Optional[str] = Field(None, alias="companyName", description="Company name")
    location: Optional[str] = Field(None, description="City, state")
    industry_type: Optional[str] = Field(None, alias="industryType", description="Trade, e.g. roofing")


class QuickResearchBody(BaseModel):
    """Quick research request."""
    profile: Dict[str, Any] = Field(default_factory=dict, description="Current company profile")


# ============================================================================
# API ENDPOINTS
# ============================================================================

@app.get("/health")
async def health():
    """Health check including provider configuration."""
    settings = get_settings()
    external = ExternalAPIConfig.from_settings(settings)
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": __version__,
        "providers": {
            "anthropic": bool(settings.ANTHROPIC_API_KEY),
            "perplexity": external.has_perplexity,
            "brightData": external.has_bright_data,
        },
    }


@app.post("/api/profile/deep-research")
async def deep_research(body: DeepResearchBody):
    """Research a company from its website and/or name."""
    request = ResearchRequest(
        website_url=body.website_url,
        company_name=body.company_name,
        location=body.location,
        industry_type=body.industry_type,
    )
    try:
        request.validate()
    except ResearchValidationError as e:
        return JSONResponse(status_code=400, content={"success": False, "error": str(e)})

    result = await run_deep_research(
        website_url=request.website_url,
        company_name=request.company_name,
        location=request.location,
        industry_type=request.industry_type,
    )
    if not result.success:
        return JSONResponse(status_code=500, content=result.to_dict())
    return result.to_dict()


@app.post("/api/profile/quick-research")
async def quick_research(body: QuickResearchBody):
    """Suggest values for the missing fields of an existing profile."""
    profile = body.profile
    if not profile.get("name") and not profile.get("website"):
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": "Please add your company name or website first to enable quick research",
            },
        )

    result = await run_quick_research(profile)
    if not result.success:
        return JSONResponse(status_code=500, content=result.to_dict())
    return result.to_dict()


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.research:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
