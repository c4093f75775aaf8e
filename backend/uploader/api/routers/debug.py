from fastapi import APIRouter, Depends

from uploader.api.deps import get_storage_gateway
from uploader.schemas import DiagnosticsReport
from uploader.services.storage import StorageGateway

router = APIRouter(prefix="/debug", tags=["debug"])


@router.get("/s3", response_model=DiagnosticsReport, response_model_exclude_none=True)
async def debug_s3(gateway: StorageGateway = Depends(get_storage_gateway)) -> DiagnosticsReport:
    """Report bucket reachability; step failures are returned as data."""
    return await gateway.probe_connectivity()
