from fastapi import APIRouter, Response

from passentry.web.deps import AUTH_COOKIE_NAME, AppDep, AuthTokenDep
from passentry.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


@router.post(
    "/auth/logout",
    summary="End session",
    description="Invalidate the current authentication session.",
    operation_id="logout",
    status_code=204,
    responses={
        204: {"description": "Successfully logged out"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def logout(app: AppDep, auth_token: AuthTokenDep, response: Response) -> None:
    await app.logout(auth_token)
    response.delete_cookie(AUTH_COOKIE_NAME)
