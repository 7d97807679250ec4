from fastapi import APIRouter, Depends, HTTPException

from privacyweave.dependencies import get_storage
from privacyweave.schemas.job_listing import JobListingResponse
from privacyweave.storage import Storage

router = APIRouter(prefix="/job-listings", tags=["job-listings"])


@router.get("", response_model=list[JobListingResponse])
async def list_job_listings(storage: Storage = Depends(get_storage)):
    return storage.get_active_job_listings()


@router.get("/{listing_id}", response_model=JobListingResponse)
async def get_job_listing(listing_id: int, storage: Storage = Depends(get_storage)):
    listing = storage.get_job_listing(listing_id)
    if not listing:
        raise HTTPException(status_code=404, detail="Job listing not found")
    return listing
