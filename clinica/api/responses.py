"""
Rendering of mutation results for the dashboard.

Success:  {"success": true, "data": {...}}
Failure:  {"success": false, "error": "...", "code": "...", "details": {...}}
"""

from typing import Optional, Type

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from clinica.schemas.result import MutationResult


def mutation_response(
    result: MutationResult,
    schema: Optional[Type[BaseModel]] = None,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    if not result.success:
        body = {"success": False, "error": result.error, "code": result.code}
        if result.details:
            body["details"] = result.details
        return JSONResponse(status_code=result.http_status, content=jsonable_encoder(body))

    data = result.data
    if schema is not None and data is not None:
        data = schema.model_validate(data).model_dump(mode="json")
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "data": jsonable_encoder(data)},
    )
