"""API endpoints for the IDE list and the selected IDE."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from ..context import AppContext
from ..models.config import IdeDescriptor
from ..platforms.base import SupportedPlatform
from ..services.error_handler import ConfigurationError, JumperError
from .dependencies import config_error_to_http, get_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ide", tags=["IDE Management"])


class IdeResponse(BaseModel):
    """IDE entry with its effective path on the serving platform."""
    id: str
    name: str
    is_custom: bool
    hidden: bool
    selected: bool
    override_path: Optional[str]
    default_path: Optional[str]
    overrides: Dict[str, Optional[str]]

    @classmethod
    def from_descriptor(cls, ide: IdeDescriptor, context: AppContext, selected_id: Optional[str]) -> "IdeResponse":
        platform = context.platform
        return cls(
            id=ide.id,
            name=ide.name,
            is_custom=ide.is_custom,
            hidden=ide.hidden,
            selected=ide.id == selected_id,
            override_path=ide.override_for(platform),
            default_path=context.path_table.lookup(ide.id, platform),
            overrides={p.value: v for p, v in ide.override_path_by_platform.items()},
        )


class IdeCreateRequest(BaseModel):
    """Request model for adding or replacing an IDE."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="IDE id, e.g. PyCharm")
    display_name: Optional[str] = Field(default=None, alias="displayName")
    is_custom: bool = Field(default=False, alias="isCustom")
    path: Optional[str] = Field(default=None, description="Command path for the serving platform")
    replace: bool = Field(default=False, description="Update an existing standard IDE")


class IdeUpdateRequest(BaseModel):
    """Partial update; omitted fields are left unchanged."""
    model_config = ConfigDict(populate_by_name=True)

    hidden: Optional[bool] = None
    display_name: Optional[str] = Field(default=None, alias="displayName")
    path: Optional[str] = Field(default=None, description="Empty string clears the override")
    platform: Optional[str] = Field(default=None, description="Platform the path applies to")


class SelectRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ide_id: str = Field(..., alias="ideId")


class ResolveResponse(BaseModel):
    ide_id: str
    platform: str
    executable_path: str
    is_absolute_path: bool
    kind: str
    source: str


def _platform_or_400(name: Optional[str], context: AppContext) -> SupportedPlatform:
    if not name:
        return context.platform
    try:
        return SupportedPlatform.from_name(name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=List[IdeResponse])
async def list_ides(context: AppContext = Depends(get_context)):
    """List every configured IDE, hidden ones included."""
    try:
        config = context.config_manager.load_config()
    except ConfigurationError as e:
        raise config_error_to_http(e)
    return [IdeResponse.from_descriptor(ide, context, config.selected_ide) for ide in config.ide_configurations]


@router.get("/visible", response_model=List[Dict[str, Any]])
async def list_visible_ides(context: AppContext = Depends(get_context)):
    """Quick-pick items for the IDE selector."""
    try:
        return context.config_manager.visible_ides()
    except ConfigurationError as e:
        raise config_error_to_http(e)


@router.get("/status", response_model=Dict[str, str])
async def get_status(context: AppContext = Depends(get_context)):
    """Status-bar text for the selected IDE."""
    try:
        return context.config_manager.status()
    except ConfigurationError as e:
        raise config_error_to_http(e)


@router.post("", response_model=IdeResponse, status_code=201)
async def add_ide(request: IdeCreateRequest, context: AppContext = Depends(get_context)):
    """Add a custom IDE, or update a standard one with ``replace``."""
    platform = context.platform
    try:
        descriptor = IdeDescriptor(
            id=request.id,
            display_name=request.display_name,
            is_custom=request.is_custom,
            override_path_by_platform={platform: request.path} if request.path else {},
        )
        saved = context.config_manager.save_ide(descriptor, platform, replace=request.replace)
        config = context.config_manager.load_config()
    except ConfigurationError as e:
        raise config_error_to_http(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return IdeResponse.from_descriptor(saved, context, config.selected_ide)


@router.patch("/{ide_id}", response_model=IdeResponse)
async def update_ide(ide_id: str, request: IdeUpdateRequest, context: AppContext = Depends(get_context)):
    """Hide, show, rename or change the command path of an IDE."""
    manager = context.config_manager
    try:
        if request.hidden is not None or request.display_name is not None:
            manager.update_ide(ide_id, hidden=request.hidden, display_name=request.display_name)
        if request.path is not None:
            manager.set_override(ide_id, _platform_or_400(request.platform, context), request.path)
        config = manager.load_config()
        ide = manager.get_ide(ide_id)
    except ConfigurationError as e:
        raise config_error_to_http(e)
    return IdeResponse.from_descriptor(ide, context, config.selected_ide)


@router.delete("/{ide_id}")
async def delete_ide(ide_id: str, context: AppContext = Depends(get_context)):
    """Remove an IDE; the selected IDE cannot be removed."""
    try:
        removed = context.config_manager.remove_ide(ide_id)
    except ConfigurationError as e:
        raise config_error_to_http(e)
    if not removed:
        raise HTTPException(status_code=404, detail=f"IDE {ide_id} is not configured")
    return {"status": "success", "message": f"Removed {ide_id}"}


@router.put("/selected", response_model=IdeResponse)
async def select_ide(request: SelectRequest, context: AppContext = Depends(get_context)):
    """Change the selected IDE."""
    try:
        ide = context.config_manager.select_ide(request.ide_id)
    except ConfigurationError as e:
        raise config_error_to_http(e)
    return IdeResponse.from_descriptor(ide, context, ide.id)


@router.get("/{ide_id}/resolve", response_model=ResolveResponse)
async def resolve_ide(ide_id: str, platform: Optional[str] = None, context: AppContext = Depends(get_context)):
    """Show the command an IDE resolves to, without launching it."""
    target_platform = _platform_or_400(platform, context)
    try:
        ide = context.config_manager.get_ide(ide_id)
        resolved = context.resolver.resolve(ide, target_platform)
    except ConfigurationError as e:
        raise config_error_to_http(e)
    except JumperError as e:
        raise HTTPException(status_code=422, detail={"message": e.message, "error_code": e.error_code})
    return ResolveResponse(
        ide_id=ide.id,
        platform=target_platform.value,
        executable_path=resolved.executable_path,
        is_absolute_path=resolved.is_absolute_path,
        kind=resolved.kind.value,
        source=resolved.source,
    )
