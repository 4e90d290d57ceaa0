"""GitHub REST helpers: who owns the token, and where to push."""

import logging
from urllib.parse import quote

import requests

from pixeltext.config import settings

logger = logging.getLogger(__name__)

API = "https://api.github.com"


def api_headers(token: str):
    return {"Accept": "application/vnd.github+json", "Authorization": f"token {token}",
            "X-GitHub-Api-Version": "2022-11-28", "User-Agent": "pixeltext"}


def get_user_login_id(token: str):
    r = requests.get(f"{API}/user", headers=api_headers(token), timeout=settings.api_timeout)
    r.raise_for_status(); j = r.json()
    return j["login"], j["id"]


def build_noreply_email(login: str, uid: int):
    return f"{uid}+{login}@users.noreply.github.com"


def identity_for_token(token: str):
    """(name, email) that GitHub will attribute commits to for this token's account."""
    login, uid = get_user_login_id(token)
    return login, build_noreply_email(login, uid)


def create_private_repo(token: str, name: str, description: str = "", owner: str = None) -> str:
    """Create a private repository and return its HTTPS clone URL."""
    payload = {"name": name, "description": description, "private": True, "auto_init": False}
    url = f"{API}/orgs/{owner}/repos" if owner else f"{API}/user/repos"
    r = requests.post(url, headers=api_headers(token), json=payload, timeout=settings.api_timeout + 5)
    r.raise_for_status()
    data = r.json()
    logger.info("created private repo %s", data["full_name"])
    return data["clone_url"]


def auth_url(url: str, token: str) -> str:
    if url and url.startswith("https://") and token:
        return url.replace("https://", f"https://x-access-token:{quote(token, safe='')}@", 1)
    return url
