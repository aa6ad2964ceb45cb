from typing import Union

from fastapi.responses import JSONResponse

from campusvote.errors import status_for
from campusvote.models import ActionResult


def respond(result: ActionResult) -> Union[ActionResult, JSONResponse]:
    """Pass successful results through; render failures with their error status."""
    if result.success:
        return result
    return JSONResponse(
        status_code=status_for(result.error or ""),
        content=result.model_dump(mode="json", by_alias=True),
    )
