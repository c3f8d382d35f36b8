from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
async def index():
    return "kosync server is running."


@router.get("/healthcheck")
async def healthcheck():
    """
    Anonymous liveness check used by KOReader and container health checks.
    """
    return {"state": "OK"}
