# pizza_api/api/routers/unified.py
from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from pizza_api.api.dispatcher import Dispatcher

router = APIRouter(tags=["dispatch"])

METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]


@router.api_route("/{full_path:path}", methods=METHODS, include_in_schema=False)
async def unified(full_path: str, request: Request) -> JSONResponse:
    """Every path and method goes through the dispatcher's route table."""
    dispatcher: Dispatcher = request.app.state.dispatcher
    body = await request.body()

    #store access is blocking file I/O
    result = await run_in_threadpool(
        dispatcher.dispatch,
        request.method,
        request.url.path,
        dict(request.query_params),
        dict(request.headers),
        body,
    )
    return JSONResponse(status_code=result.status_code, content=result.payload)
