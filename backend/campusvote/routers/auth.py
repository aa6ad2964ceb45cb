from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from campusvote.core.logger import auth_logger as logger
from campusvote.core.rate_limit import limiter, login_limit
from campusvote.dependencies import get_election_service
from campusvote.models import ActionResult
from campusvote.security import check_admin_password, clear_session_cookies, set_session_cookie
from campusvote.service import ElectionService
from campusvote.status import ElectionStatus

router = APIRouter(prefix="/auth", tags=["auth"])


# ---------------- Payloads ----------------
class StudentLoginPayload(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    code: str = Field(min_length=1, max_length=32)


class AdminLoginPayload(BaseModel):
    password: str = Field(min_length=1, max_length=256)


# ---------------- Utilities ----------------
def _client_ip(request: Request) -> str:
    client = request.client
    return client.host if client and client.host else "0.0.0.0"


def _failure(status_code: int, message: str, error: str) -> JSONResponse:
    result = ActionResult(success=False, message=message, error=error)
    return JSONResponse(status_code=status_code, content=result.model_dump(mode="json", by_alias=True))


# ---------------- Student login ----------------
@router.post("/student/login")
@limiter.limit(login_limit)
def student_login(
    request: Request,
    payload: StudentLoginPayload,
    service: ElectionService = Depends(get_election_service),
):
    ip = _client_ip(request)
    logger.info(f"Student login attempt for {payload.name!r} from IP {ip} Code:[REDACTED]")

    election = service.get_election_status()
    if election.status in (ElectionStatus.NOT_SET, ElectionStatus.UPCOMING):
        return _failure(
            status.HTTP_403_FORBIDDEN, "The election has not started yet.", "election_not_open"
        )

    voter = service.authenticate_student(payload.name, payload.code)
    if voter is None:
        logger.warning(f"Failed student login for {payload.name!r} from IP {ip}")
        return _failure(
            status.HTTP_401_UNAUTHORIZED, "Invalid name or voting code.", "invalid_credentials"
        )

    logger.info(f"Successful student login for voter {voter.id} from IP {ip}")
    response = JSONResponse(
        content={
            "success": True,
            "message": f"Welcome, {voter.name}.",
            "voter": {"id": voter.id, "name": voter.name, "hasVoted": voter.has_voted},
            "status": election.status.value,
        }
    )
    set_session_cookie(response, "voter", voter.id)
    return response


# ---------------- Admin login ----------------
@router.post("/admin/login")
@limiter.limit(login_limit)
def admin_login(request: Request, payload: AdminLoginPayload):
    ip = _client_ip(request)
    if not check_admin_password(payload.password):
        logger.warning(f"Failed admin login from IP {ip} Password:[REDACTED]")
        return _failure(status.HTTP_401_UNAUTHORIZED, "Incorrect password.", "invalid_credentials")

    logger.info(f"Successful admin login from IP {ip}")
    response = JSONResponse(content={"success": True, "message": "Logged in as administrator."})
    set_session_cookie(response, "admin", "admin")
    return response


# ---------------- Logout ----------------
@router.post("/logout")
def logout(request: Request):
    logger.info(f"Logout from IP {_client_ip(request)}")
    response = JSONResponse(content={"success": True, "message": "Logged out."})
    clear_session_cookies(response)
    return response
