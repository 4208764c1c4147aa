"""Contrôle d'accès admin : ?token= ou cookie admin_token comparé à ADMIN_TOKEN."""
import os

from fastapi import HTTPException, Request


def check_admin_token(request: Request) -> str:
    token = (request.query_params.get("token")
             or request.cookies.get("admin_token", ""))
    if token != os.getenv("ADMIN_TOKEN", "changeme"):
        raise HTTPException(403, "Accès refusé")
    return token
