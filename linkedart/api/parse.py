import logging

from fastapi import APIRouter, HTTPException
from fastapi.concurrency import run_in_threadpool

from linkedart.analyzer.orchestrator import parse_url
from linkedart.schemas.response import ParseRequest, ParseResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/parse", response_model=ParseResponse)
async def parse(payload: ParseRequest):

    if payload.depth is not None and payload.depth < 0:
        raise HTTPException(400, "'depth' must be zero or positive")

    try:
        result = await run_in_threadpool(
            parse_url,
            payload.url,
            None,
            payload.depth,
            payload.resolve
        )

    except Exception as e:
        logger.exception(f"Parse crashed for {payload.url}")
        raise HTTPException(500, str(e))

    parsed = result.pop("parsed", None)
    if parsed is not None:
        result["parsed"] = parsed.to_dict()

    result.setdefault("url", payload.url)
    return result
