from typing import Dict, List

from models.hateoas import HATEOASLink
from services.errors import LinkBuildError
from utils.pagination import pagination_targets


# -----------------------------------------------------------------------------
# Route table
# -----------------------------------------------------------------------------
# Keys are the FastAPI route names, so the table can be checked against the app.
ROUTES: Dict[str, str] = {
    "list_users": "/v1/users?page={page}&size={size}",
    "get_user": "/v1/users/{user_id}",
    "get_user_profile": "/v1/users/{user_id}/profile",
    "list_user_addresses": "/v1/users/{user_id}/addresses",
    "get_user_address": "/v1/users/{user_id}/addresses/{address_id}",
}


def link_to(relation: str, route: str, base_url: str = "", **keys) -> HATEOASLink:
    """Resolve one relation against the route table.

    Raises LinkBuildError for an unknown route or a missing/empty key.
    """
    template = ROUTES.get(route)
    if template is None:
        raise LinkBuildError(f"No route template for '{route}' (relation '{relation}')")

    for name, value in keys.items():
        if value is None or str(value) == "":
            raise LinkBuildError(f"Missing value for '{name}' building '{relation}' link")

    try:
        path = template.format(**keys)
    except KeyError as ex:
        raise LinkBuildError(
            f"Missing value for {ex} building '{relation}' link"
        ) from ex

    return HATEOASLink(relation=relation, href=f"{base_url.rstrip('/')}{path}")


# -----------------------------------------------------------------------------
# User
# -----------------------------------------------------------------------------
def build_user_links(user_id: str, base_url: str = "") -> List[HATEOASLink]:
    return [
        link_to("self", "get_user", base_url, user_id=user_id),
        link_to("profile", "get_user_profile", base_url, user_id=user_id),
        link_to("addresses", "list_user_addresses", base_url, user_id=user_id),
    ]


# -----------------------------------------------------------------------------
# User profile
# -----------------------------------------------------------------------------
def build_user_profile_links(user_id: str, base_url: str = "") -> List[HATEOASLink]:
    return [
        link_to("self", "get_user_profile", base_url, user_id=user_id),
        link_to("user", "get_user", base_url, user_id=user_id),
        link_to("addresses", "list_user_addresses", base_url, user_id=user_id),
    ]


# -----------------------------------------------------------------------------
# User addresses
# -----------------------------------------------------------------------------
def build_address_links(user_id: str, address_id: str, base_url: str = "") -> List[HATEOASLink]:
    # same set whether the address is standalone or nested in a parent
    return [
        link_to("self", "get_user_address", base_url, user_id=user_id, address_id=address_id),
        link_to("user", "get_user", base_url, user_id=user_id),
    ]


def build_addresses_links(user_id: str, base_url: str = "") -> List[HATEOASLink]:
    return [
        link_to("self", "list_user_addresses", base_url, user_id=user_id),
        link_to("user", "get_user", base_url, user_id=user_id),
        link_to("profile", "get_user_profile", base_url, user_id=user_id),
    ]


# -----------------------------------------------------------------------------
# Users page
# -----------------------------------------------------------------------------
def build_page_links(page: int, size: int, total_pages: int, base_url: str = "") -> List[HATEOASLink]:
    # filter params of the incoming request are not carried over
    return [
        link_to(relation, "list_users", base_url, page=target, size=size)
        for relation, target in pagination_targets(page, total_pages)
    ]
