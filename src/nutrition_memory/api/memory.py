"""Memory management API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from nutrition_memory.api.models import DensityPayload, PhrasePayload  # noqa: TC001

if TYPE_CHECKING:
    from nutrition_memory.containers import AppContainer

router = APIRouter(prefix="/memory", tags=["memory"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/densities", dependencies=[Depends(require_admin)])
async def list_densities(request: Request) -> dict[str, object]:
    """Return all learned densities keyed by normalized food name."""
    container: AppContainer = request.app.state.container
    return {"densities": container.memory_service.list_densities()}


@router.put("/densities/{name}", dependencies=[Depends(require_admin)])
async def put_density(
    name: str, payload: DensityPayload, request: Request
) -> dict[str, object]:
    """Store a density, replacing any learned one for the same food."""
    container: AppContainer = request.app.state.container
    key = container.memory_service.upsert_density(name, payload.to_domain())
    return {"key": key}


@router.delete("/densities/{name}", dependencies=[Depends(require_admin)])
async def delete_density(name: str, request: Request) -> dict[str, str]:
    """Forget the density learned for a food."""
    container: AppContainer = request.app.state.container
    if not container.memory_service.remove_density(name):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"status": "deleted"}


@router.get("/phrases", dependencies=[Depends(require_admin)])
async def list_phrases(request: Request) -> dict[str, object]:
    """Return all cached meals keyed by normalized description."""
    container: AppContainer = request.app.state.container
    return {"phrases": container.memory_service.list_phrases()}


@router.put("/phrases", dependencies=[Depends(require_admin)])
async def put_phrase(payload: PhrasePayload, request: Request) -> dict[str, str]:
    """Store a cached meal for a description."""
    container: AppContainer = request.app.state.container
    container.memory_service.upsert_phrase(payload.description, payload.to_domain())
    return {"status": "stored"}


@router.delete("/phrases", dependencies=[Depends(require_admin)])
async def delete_phrase(description: str, request: Request) -> dict[str, str]:
    """Forget the cached meal for a description."""
    container: AppContainer = request.app.state.container
    if not container.memory_service.remove_phrase(description):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"status": "deleted"}
