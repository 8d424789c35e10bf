"""
Opportunity Routes

GET /google-{category} - Listings from SerpAPI, where category is one of
jobs, internships, bootcamps, hackathons, mentorship, remote
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from typing import List, Optional

from profilehub.schemas.schemas import ErrorResponse, Opportunity, OpportunityCategory
from profilehub.services.opportunity_service import (
    SerpApiClient, SearchProviderError, fetch_opportunities, get_search_client
)

router = APIRouter(
    tags=["Opportunities"],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)


@router.get("/google-{category}", response_model=List[Opportunity])
async def get_opportunities(
    category: OpportunityCategory,
    q: Optional[str] = Query(None, description="Search text; defaults per category"),
    location: Optional[str] = Query(None, description="Defaults to India"),
    client: SerpApiClient = Depends(get_search_client),
):
    """
    Search the web for opportunities in a category.

    Returns up to 10 listings in a uniform shape.
    """
    try:
        return await fetch_opportunities(client, category, q=q, location=location)
    except SearchProviderError as e:
        raise HTTPException(
            status_code=500,
            detail={
                "error": f"Failed to fetch {category.value} from SerpAPI",
                "details": str(e)
            }
        )
