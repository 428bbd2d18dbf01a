from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from resolver_app.api.v1.resolutions import attachment_headers
from resolver_app.schemas.lines import AnalyzeRequest, DownloadRequest, LineSetSummary, MergeRequest
from resolver_app.services.line_set import summarize_lines

router = APIRouter(prefix="/files", tags=["files"])


@router.post("/analyze", response_model=LineSetSummary)
def analyze_file(request: AnalyzeRequest):
    """Count total, unique and duplicate lines in one text file"""
    return summarize_lines([request.content], sort=request.sort)


@router.post("/merge", response_model=LineSetSummary)
def merge_files(request: MergeRequest):
    """Merge several text files into one unique set of lines"""
    return summarize_lines(request.files, sort=request.sort)


@router.post("/download", response_class=PlainTextResponse)
def download_unique_lines(request: DownloadRequest):
    """Unique lines of the given files as a text attachment"""
    summary = summarize_lines(request.files, sort=request.sort)
    return PlainTextResponse(
        "\n".join(summary.lines),
        headers=attachment_headers(request.filename)
    )
