"""Passwordless entry endpoints: HTML pages and their JSON counterparts."""

from fastapi import APIRouter, Request, Response
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import BaseModel, EmailStr, Field

from passentry.core.modules.user.validators import is_valid_email
from passentry.errors import AuthenticationError
from passentry.web.deps import AppDep, OptionalAuthTokenDep, set_auth_cookie
from passentry.web.openapi import ErrorResponse

router = APIRouter(tags=["entry"])
api_router = APIRouter(tags=["entry"])

# Loose truthiness for the controller flag: anything but empty, "0" or "false"
FALSY_FLAGS = {"", "0", "false"}


class EntryRequest(BaseModel):
    """Request for an emailed entry link."""

    email: EmailStr = Field(..., description="Email address of the account")


class EntryRequestResponse(BaseModel):
    """Acknowledgement; identical for registered and unknown addresses."""

    status: str = Field("requested", description="Always 'requested'")


class RedeemRequest(BaseModel):
    """Entry key taken from the emailed link."""

    token: str = Field(..., min_length=1, description="Entry key from the link")


class LoginResponse(BaseModel):
    """Authentication response."""

    token: str = Field(..., description="Authentication token for subsequent requests")


@router.get(
    "/entry",
    summary="Entry controller",
    description="Redeem an entry link, or show the form to request one.",
    operation_id="entryController",
    response_class=HTMLResponse,
)
async def entry_controller(request: Request, app: AppDep, auth_token: OptionalAuthTokenDep) -> Response:
    settings = app.config.entry
    params = request.query_params
    activated = params.get(settings.controller_parameter, "").strip().lower() not in FALSY_FLAGS

    if activated and auth_token is not None:
        return RedirectResponse(app.config.site_url, status_code=303)

    key = params.get(settings.key_parameter, "")
    if activated and key:
        try:
            new_token = await app.redeem_entry(key)
        except AuthenticationError:
            return HTMLResponse(app.render_view("request"))
        response = HTMLResponse(app.render_view("success"))
        set_auth_cookie(response, app, new_token)
        return response

    return HTMLResponse(app.render_view("request"))


@router.post(
    "/entry",
    summary="Request an entry link",
    description="Form endpoint. Shows the same confirmation whether or not the email is registered.",
    operation_id="entryRequest",
    response_class=HTMLResponse,
)
async def entry_request(request: Request, app: AppDep) -> HTMLResponse:
    form = await request.form()
    email = form.get(app.config.entry.email_parameter)
    if not isinstance(email, str) or not is_valid_email(email):
        return HTMLResponse(app.render_view("request"))

    await app.request_entry(email)
    return HTMLResponse(app.render_view("requested"))


@api_router.post(
    "/auth/entry/request",
    summary="Request entry link",
    description="Email a one-time entry link if the address belongs to a user. "
    "The response does not reveal whether it does.",
    operation_id="requestEntry",
    status_code=202,
    responses={
        202: {"description": "Request accepted"},
        422: {"description": "Malformed email address"},
    },
)
async def request_entry(request: EntryRequest, app: AppDep) -> EntryRequestResponse:
    await app.request_entry(request.email)
    return EntryRequestResponse()


@api_router.post(
    "/auth/entry/redeem",
    summary="Redeem entry key",
    description="Exchange a one-time entry key for an authentication token.",
    operation_id="redeemEntry",
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": ErrorResponse, "description": "Invalid, expired or already used key"},
    },
)
async def redeem_entry(request: RedeemRequest, app: AppDep, response: Response) -> LoginResponse:
    token = await app.redeem_entry(request.token)
    set_auth_cookie(response, app, token)
    return LoginResponse(token=token)
