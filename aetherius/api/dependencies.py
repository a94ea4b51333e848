"""
FastAPI dependencies.

Handlers never reach for globals: the components built by
create_app_components() live on app.state and are injected from there.
"""

from typing import Annotated

from fastapi import Depends, Request

from aetherius.orchestrator import AppComponents
from aetherius.services.storage import EntityStoreInterface


def get_components(request: Request) -> AppComponents:
    return request.app.state.components


def get_store(request: Request) -> EntityStoreInterface:
    return request.app.state.components.store


ComponentsDependency = Annotated[AppComponents, Depends(get_components)]
StoreDependency = Annotated[EntityStoreInterface, Depends(get_store)]
