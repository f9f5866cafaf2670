"""Cache status endpoint: GET /status. Pretty-printed JSON."""

import json
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from apps.api.config import Config, get_config
from apps.api.schemas.status import StatusReport
from apps.api.services.repo import DescriptionCache, get_description_cache
from apps.api.services.status import compute_status

router = APIRouter()


class PrettyJSONResponse(JSONResponse):
    """JSON with indent=2."""

    def render(self, content: Any) -> bytes:
        return json.dumps(content, ensure_ascii=False, indent=2).encode("utf-8")


@router.get("/status", response_model=StatusReport, response_class=PrettyJSONResponse)
def status(
    cache: Annotated[DescriptionCache, Depends(get_description_cache)],
    cfg: Annotated[Config, Depends(get_config)],
) -> StatusReport:
    """Counts, storage estimate, timestamp range, age buckets, negative results, config echo."""
    return compute_status(cache, cfg)
