from __future__ import annotations

import logging

from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse

from spinbook.application.exceptions import SpinBookError
from spinbook.application.use_cases.check_configuration import diagnose_failure, environment_info
from spinbook.core.config import settings
from spinbook.wiring import dependencies


router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/test-config")
def test_config() -> JSONResponse:
    try:
        use_case = dependencies.build_configuration_check()
        return JSONResponse(status_code=200, content=use_case.execute())
    except SpinBookError as e:
        logger.error("Configuration check failed", extra={"code": e.code, "reason": e.detail})
        environment = environment_info(
            {
                "name": settings.STUDIO_NAME,
                "address": settings.STUDIO_ADDRESS,
                "email": settings.STUDIO_EMAIL,
                "phone": settings.STUDIO_PHONE,
            },
            settings.ENV,
        )
        return JSONResponse(status_code=500, content=diagnose_failure(e, environment))


@router.options("/test-config", include_in_schema=False)
def preflight() -> Response:
    return Response(status_code=200)
