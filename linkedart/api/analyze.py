import asyncio
import logging
from typing import Any, Dict, Tuple

from fastapi import APIRouter, HTTPException
from fastapi.concurrency import run_in_threadpool

from linkedart.analyzer.orchestrator import analyze_url
from linkedart.config import get_settings
from linkedart.schemas.response import AnalyzeRequest, AnalyzeResponse

logger = logging.getLogger(__name__)

router = APIRouter()


# --------------------------------------------------
# URL PROCESSOR (PARALLEL SAFE)
# --------------------------------------------------

async def process_url(url: str) -> Tuple[str, Dict[str, Any]]:
    # one fetcher (and visited/log state) per run
    try:
        result = await run_in_threadpool(analyze_url, url)
        return url, result

    except Exception as e:
        logger.exception(f"Analysis crashed for {url}")
        return url, {"success": False, "url": url, "error": str(e)}


# --------------------------------------------------
# ANALYZE ENDPOINT
# --------------------------------------------------

@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(payload: AnalyzeRequest):

    max_urls = get_settings().max_urls

    # ---------------- MULTIPLE URLS ----------------

    if payload.urls is not None:

        if not payload.urls:
            raise HTTPException(400, "'urls' must be a non-empty list")

        if len(payload.urls) > max_urls:
            raise HTTPException(400, f"Maximum {max_urls} URLs allowed")

        results_list = await asyncio.gather(
            *(process_url(url) for url in payload.urls)
        )

        return {
            "total": len(results_list),
            "results": dict(results_list)
        }

    # ---------------- SINGLE URL ----------------

    if payload.url:

        key, value = await process_url(payload.url)

        return {
            "total": 1,
            "results": {key: value}
        }

    raise HTTPException(400, "Provide 'url' or 'urls'")
