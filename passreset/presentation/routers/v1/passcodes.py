from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status

from passreset.application.dispatcher import PasscodeDispatcher
from passreset.domain.entities import ErrorKind
from passreset.presentation.dependencies import get_dispatcher
from passreset.schemas.requests import PasscodeActionIn
from passreset.schemas.responses import ErrorOut

router = APIRouter(prefix="/passcodes", tags=["Passcodes"])

ERROR_STATUS = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DELIVERY_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@router.post(
    "",
    responses={
        200: {"description": '{"throttled": bool} or {"ok": bool, "error": str}'},
        400: {"model": ErrorOut},
        500: {"model": ErrorOut},
    },
)
async def post_passcode_action(
    body: PasscodeActionIn,
    dispatcher: Annotated[PasscodeDispatcher, Depends(get_dispatcher)],
) -> dict[str, Any]:
    reply = await dispatcher.dispatch(body.action, body.email, body.code)
    if reply.is_error:
        raise HTTPException(status_code=ERROR_STATUS[reply.error], detail=reply.message)
    return reply.body
