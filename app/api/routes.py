"""
FastAPI routes for the TIL relay.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from http import HTTPStatus
from typing import Annotated, Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import JSONResponse, RedirectResponse

from app.core.config import AppSettings
from app.core.errors import InvalidOAuthStateError
from app.dependencies import (
    SettingsDependency,
    get_auth_service,
    get_content_publisher,
    get_current_user,
    get_github_oauth_client,
    get_llm_client,
    get_oauth_state_encoder,
    get_repository_binding_store,
    get_token_registry,
)
from app.schemas import (
    ApiResponse,
    AuthData,
    ConvertTilRequest,
    EnhanceTilRequest,
    GitHubLoginRequest,
    OAuthCallbackPayload,
    RepositoryInfo,
    RepositoryUrlRequest,
    UploadRequest,
    UploadResult,
)
from app.services import SessionClaims, parse_repository_url

router = APIRouter()
logger = logging.getLogger(__name__)

CurrentUser = Annotated[SessionClaims, Depends(get_current_user)]


def _wants_html(request: Request) -> bool:
    return "text/html" in request.headers.get("accept", "").lower()


def _with_query(url: str, **params: str) -> str:
    parts = urlsplit(url)
    query = dict(parse_qsl(parts.query))
    query.update(params)
    return urlunsplit(parts._replace(query=urlencode(query)))


def _login_response(result: Any) -> ApiResponse[AuthData]:
    return ApiResponse[AuthData](
        message="login_success",
        data=AuthData(access_token=result.access_token, user=result.user),
    )


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.get("/auth/github/authorize", status_code=HTTPStatus.OK)
async def start_github_oauth_flow(
    request: Request,
    oauth_client: Annotated[Any, Depends(get_github_oauth_client)],
    state_encoder: Annotated[Any, Depends(get_oauth_state_encoder)],
    redirect_to: str | None = Query(
        default=None,
        description="Optional front-end URL to return to after signing in.",
    ),
    redirect: bool = Query(
        default=False,
        description="When true, respond with a redirect to the GitHub consent screen.",
    ),
) -> Any:
    """
    Kick off the OAuth flow by generating a state token and authorization URL.
    """
    state = state_encoder.encode(
        {
            "nonce": uuid.uuid4().hex,
            "redirect_to": redirect_to,
            "issued_at": datetime.now(timezone.utc).isoformat(),
        }
    )
    authorization_url = oauth_client.build_authorization_url(state=state)

    if redirect or _wants_html(request):
        return RedirectResponse(url=authorization_url, status_code=HTTPStatus.TEMPORARY_REDIRECT)

    return {"authorization_url": authorization_url, "state": state}


@router.get("/auth/github/callback", status_code=HTTPStatus.OK)
async def handle_github_oauth_callback(
    request: Request,
    state_encoder: Annotated[Any, Depends(get_oauth_state_encoder)],
    auth_service: Annotated[Any, Depends(get_auth_service)],
    settings: AppSettings = SettingsDependency,
    state: str = Query(..., description="OAuth state token."),
    code: str = Query(..., description="Authorization code returned by GitHub."),
    redirect: bool = Query(
        default=False,
        description="When true, redirect browser clients instead of returning JSON.",
    ),
) -> Response:
    """Complete the GitHub redirect: verify state, sign in, hand the session back."""
    payload = OAuthCallbackPayload(state=state, code=code)
    state_data = state_encoder.decode(payload.state)

    issued_at_raw = state_data.get("issued_at")
    if not issued_at_raw:
        raise InvalidOAuthStateError("Missing issued_at in state token.")
    try:
        issued_at = datetime.fromisoformat(issued_at_raw)
    except ValueError as exc:
        raise InvalidOAuthStateError("Invalid issued_at in state token.") from exc
    if issued_at.tzinfo is None:
        issued_at = issued_at.replace(tzinfo=timezone.utc)

    if datetime.now(timezone.utc) - issued_at > timedelta(
        seconds=settings.oauth.state_ttl_seconds
    ):
        raise InvalidOAuthStateError("OAuth state token has expired.")

    result = await auth_service.login_with_code(payload.code)

    redirect_target = state_data.get("redirect_to") or settings.frontend_base_url
    if redirect_target and (redirect or _wants_html(request)):
        return RedirectResponse(
            url=_with_query(str(redirect_target), access_token=result.access_token),
            status_code=HTTPStatus.TEMPORARY_REDIRECT,
        )

    return JSONResponse(content=_login_response(result).model_dump())


@router.post("/auth/github", status_code=HTTPStatus.OK, response_model=ApiResponse[AuthData])
async def github_login(
    payload: GitHubLoginRequest,
    auth_service: Annotated[Any, Depends(get_auth_service)],
) -> ApiResponse[AuthData]:
    """Exchange a code the front-end received from GitHub for a session token."""
    result = await auth_service.login_with_code(payload.code)
    return _login_response(result)


@router.get("/auth/me", status_code=HTTPStatus.OK)
async def current_user_profile(
    user: CurrentUser,
    token_registry: Annotated[Any, Depends(get_token_registry)],
) -> dict:
    return {
        "message": "success",
        "data": {
            "user": {
                "id": user.user_id,
                "github_id": user.github_id,
                "email": user.email,
            },
            "github_connected": token_registry.has_valid(user.user_id),
        },
    }


@router.post("/auth/logout", status_code=HTTPStatus.OK)
async def logout(
    user: CurrentUser,
    auth_service: Annotated[Any, Depends(get_auth_service)],
) -> dict:
    """Forget the held GitHub token; the client drops its session token."""
    auth_service.logout(user.user_id)
    return {"message": "logout_success", "data": None}


@router.post(
    "/parse/github-url",
    status_code=HTTPStatus.OK,
    response_model=ApiResponse[RepositoryInfo],
)
async def register_repository(
    payload: RepositoryUrlRequest,
    user: CurrentUser,
    binding_store: Annotated[Any, Depends(get_repository_binding_store)],
) -> ApiResponse[RepositoryInfo]:
    """Parse a repository URL and remember it as the user's publish target."""
    binding = parse_repository_url(payload.repository_url)
    binding_store.store(user.user_id, binding)
    return ApiResponse[RepositoryInfo](
        message="parse_success",
        data=RepositoryInfo(owner=binding.repo_owner, repo=binding.repo_name),
    )


@router.post(
    "/github/upload",
    status_code=HTTPStatus.OK,
    response_model=ApiResponse[UploadResult],
)
async def upload_markdown(
    payload: UploadRequest,
    user: CurrentUser,
    publisher: Annotated[Any, Depends(get_content_publisher)],
) -> ApiResponse[UploadResult]:
    """Publish a Markdown note into the registered repository."""
    result = await publisher.publish(
        owner_id=user.user_id,
        content=payload.content,
        path=payload.path,
        commit_message=payload.commit_message,
    )
    return ApiResponse[UploadResult](
        message="upload_success",
        data=UploadResult(url=result.url, path=result.path, created=result.created),
    )


@router.post("/til/convert", status_code=HTTPStatus.OK)
async def convert_til(
    payload: ConvertTilRequest,
    user: CurrentUser,
    llm_client: Annotated[Any, Depends(get_llm_client)],
) -> Any:
    """Turn raw TIL text into Markdown via the LLM service."""
    return await llm_client.convert(payload.model_dump(exclude_none=True))


@router.post("/til/enhance", status_code=HTTPStatus.OK)
async def enhance_til(
    payload: EnhanceTilRequest,
    user: CurrentUser,
    llm_client: Annotated[Any, Depends(get_llm_client)],
) -> Any:
    """Suggest keywords and images for a TIL via the LLM service."""
    return await llm_client.enhance(payload.model_dump())
