from typing import List
from pathlib import PurePath

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import PlainTextResponse

from resolver_app.schemas.resolution import MessageResponse, ResolveRequest, ResolvedUrlResponse
from resolver_app.services.errors import ResolutionError, ResolutionErrorKind
from resolver_app.services.resolution_service import ResolutionService
from resolver_app.dependencies import get_resolution_service

router = APIRouter(prefix="/resolutions", tags=["resolutions"])

# Every error kind maps to exactly one status code
ERROR_STATUS_CODES = {
    ResolutionErrorKind.INVALID_URL_FORMAT: status.HTTP_400_BAD_REQUEST,
    ResolutionErrorKind.DUPLICATE_RESOLVED_URL: status.HTTP_409_CONFLICT,
    ResolutionErrorKind.TRANSPORT_FAILURE: status.HTTP_502_BAD_GATEWAY,
    ResolutionErrorKind.TOO_MANY_REDIRECTS: status.HTTP_502_BAD_GATEWAY,
}


def attachment_headers(filename: str) -> dict:
    """Content-Disposition for a text download, path components stripped"""
    safe_name = PurePath(filename.replace("\\", "/")).name.replace('"', "") or "links.txt"
    return {"Content-Disposition": f'attachment; filename="{safe_name}"'}


@router.post("/", response_model=ResolvedUrlResponse, status_code=status.HTTP_201_CREATED)
async def resolve_url(
    request: ResolveRequest,
    service: ResolutionService = Depends(get_resolution_service)
):
    """
    Resolve a URL to its final destination and store it.

    Responds 409 if the destination is already stored, 400 for malformed
    input and 502 when the redirect chain can't be followed.
    """
    try:
        return await service.resolve_and_store(request.url)
    except ResolutionError as e:
        raise HTTPException(status_code=ERROR_STATUS_CODES[e.kind], detail=e.to_dict())


@router.get("/", response_model=List[ResolvedUrlResponse])
async def list_resolved_urls(
    service: ResolutionService = Depends(get_resolution_service)
):
    """All resolved URLs, most recent first"""
    return await service.list_resolutions()


@router.delete("/", response_model=MessageResponse)
async def clear_resolved_urls(
    service: ResolutionService = Depends(get_resolution_service)
):
    """Remove every stored resolution (idempotent)"""
    await service.clear_resolutions()
    return {"message": "All resolved URLs cleared"}


@router.get("/export", response_class=PlainTextResponse)
async def export_resolved_urls(
    filename: str = Query("links.txt", min_length=1),
    clear: bool = Query(False, description="Clear the list after exporting"),
    service: ResolutionService = Depends(get_resolution_service)
):
    """Download resolved URLs as a text file, one per line"""
    content = await service.export_text(clear=clear)
    return PlainTextResponse(content, headers=attachment_headers(filename))
