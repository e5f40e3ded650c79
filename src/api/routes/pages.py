"""Page route table.

The browser client asks here which pages exist and which of them need a
signed-in user, and checks a path before navigating to it.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_optional_user
from src.api.models import PageRoute, RouteCheckResponse, RouteTableResponse
from src.core.container import DependencyContainer, get_container
from src.models.schemas import CurrentUser

router = APIRouter(prefix="/routes", tags=["Pages"])

PAGE_ROUTES = [
    PageRoute(path="/", page="Index"),
    PageRoute(path="/about-us", page="AboutUs"),
    PageRoute(path="/how-to", page="HowTo"),
    PageRoute(path="/advertise", page="Advertise"),
    PageRoute(path="/roi", page="ROI"),
    PageRoute(path="/toolbox", page="Toolbox"),
    PageRoute(path="/visa-info", page="VisaInfo"),
    PageRoute(path="/join-free", page="JoinFree"),
    PageRoute(path="/tv-channel", page="TVChannel"),
    PageRoute(path="/business-centre", page="BusinessCentre"),
    PageRoute(path="/shared/:token", page="SharedCollection"),
    PageRoute(path="/rsvp/:token", page="RSVP"),
    PageRoute(path="/auth", page="Auth"),
    PageRoute(path="/business-auth", page="BusinessAuth"),
    PageRoute(path="/dashboard", page="MemberDashboard", requires_auth=True),
    PageRoute(path="/business-dashboard", page="BusinessDashboard", requires_auth=True),
    PageRoute(path="/user-dashboard", page="UserDashboard", requires_auth=True),
    PageRoute(path="/collections", page="Collections", requires_auth=True),
    PageRoute(path="/admin-dashboard", page="AdminDashboard", requires_auth=True),
]

NOT_FOUND_PAGE = PageRoute(path="*", page="NotFound")


def _segments_match(pattern: str, path: str) -> bool:
    expected = pattern.strip("/").split("/")
    actual = path.strip("/").split("/")
    if len(expected) != len(actual):
        return False
    return all(e.startswith(":") or e == a for e, a in zip(expected, actual))


def match_route(path: str) -> PageRoute:
    """First route whose pattern matches the path; the catch-all otherwise."""
    path = path.split("?", 1)[0] or "/"
    for route in PAGE_ROUTES:
        if _segments_match(route.path, path):
            return route
    return NOT_FOUND_PAGE


@router.get("", response_model=RouteTableResponse, summary="Page route table")
async def route_table(container: DependencyContainer = Depends(get_container)) -> RouteTableResponse:
    return RouteTableResponse(routes=PAGE_ROUTES, sign_in_path=container.settings.sign_in_path)


@router.get("/check", response_model=RouteCheckResponse, summary="May the caller open a page?")
async def check_route(
    path: str = Query(..., description="Page path, e.g. /collections"),
    user: Optional[CurrentUser] = Depends(get_optional_user),
    container: DependencyContainer = Depends(get_container),
) -> RouteCheckResponse:
    route = match_route(path)
    allowed = not route.requires_auth or user is not None
    return RouteCheckResponse(
        path=path,
        page=route.page,
        allowed=allowed,
        redirect_to=None if allowed else container.settings.sign_in_path,
    )
