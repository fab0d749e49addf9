"""
Server liveness and version routes.

Both answer with the same envelope as the entity routes so monitors can check
``success`` on every endpoint.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from qc_tracker.server.api.responses import success_response
from qc_tracker.server.core.constant import API_SCHEMA_VERSION, PROJECT_NAME, VERSION

router = APIRouter()


@router.get(
    "/health",
    summary="Server Liveness",
    description="Answers as long as the process can serve requests; does not touch the database.",
    response_class=JSONResponse,
)
async def health_check() -> JSONResponse:
    return success_response(data={"status": "ok"}, message=f"{PROJECT_NAME} is running")


@router.get(
    "/version",
    summary="Server Version",
    description="Release of the running server and the API schema it serves.",
    response_class=JSONResponse,
)
async def version() -> JSONResponse:
    return success_response(
        data={"version": VERSION, "schema_version": API_SCHEMA_VERSION},
        message="Version retrieved successfully",
    )
