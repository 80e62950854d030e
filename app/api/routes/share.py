"""Router for sharing worksheets by email."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.api.deps import get_share_service
from app.api.models import ShareRequest, ShareResponse
from app.services.sharing import ShareService

router = APIRouter()


@router.post("/share", response_model=ShareResponse)
async def share_worksheet(request: ShareRequest, service: ShareService = Depends(get_share_service)) -> JSONResponse:  # noqa: B008
  result = await service.share(request.recipients, request.worksheet_data)
  body = ShareResponse(success=result.success, message=result.message, error=result.error)
  return JSONResponse(status_code=result.status_code, content=body.model_dump(exclude_none=True))
