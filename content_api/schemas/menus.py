from __future__ import annotations

from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from content_api.domain.menus import MenuItemLocalisation, MenuItemType


class MenuCreate(BaseModel):
    """Create menu payload."""
    id: Optional[UUID] = Field(None, description="Client supplied id; generated when omitted")
    name: str = Field(..., min_length=1, description="Menu name, unique within the site")


class MenuRename(BaseModel):
    """Rename menu payload."""
    name: str = Field(..., min_length=1)


class MenuItemLocalisationWrite(BaseModel):
    """Text of a menu item in one language."""
    language_id: UUID = Field(..., description="Language ID")
    text: Optional[str] = Field(None)
    title: Optional[str] = Field(None)


class MenuItemWrite(BaseModel):
    """Create menu item payload."""
    text: str = Field(..., min_length=1, description="Default text")
    title: Optional[str] = Field(None)
    menu_item_type: MenuItemType = Field(MenuItemType.LINK)
    page_id: Optional[UUID] = Field(None, description="Target page when menu_item_type is 'page'")
    link: Optional[str] = Field(None, description="Target URL when menu_item_type is 'link'")
    parent_id: Optional[UUID] = Field(None)
    localisations: List[MenuItemLocalisationWrite] = Field(default_factory=list)

    def to_localisations(self) -> List[MenuItemLocalisation]:
        # menu_item_id is rebound by MenuItem.set_localisations
        placeholder = uuid4()
        return [
            MenuItemLocalisation(menu_item_id=placeholder, language_id=loc.language_id, text=loc.text, title=loc.title)
            for loc in self.localisations
        ]


class MenuItemUpdate(BaseModel):
    """
    Update menu item payload. Only the fields present in the request are
    changed; omitted fields keep their stored values.
    """
    text: Optional[str] = Field(None, min_length=1)
    title: Optional[str] = Field(None)
    menu_item_type: Optional[MenuItemType] = Field(None)
    page_id: Optional[UUID] = Field(None)
    link: Optional[str] = Field(None)
    parent_id: Optional[UUID] = Field(None)
    localisations: Optional[List[MenuItemLocalisationWrite]] = Field(
        None, description="Replaces every localisation when present"
    )

    def changes(self) -> Dict[str, Any]:
        """Explicitly sent item fields, localisations excluded."""
        return self.model_dump(exclude_unset=True, exclude={"localisations"})

    def to_localisations(self) -> Optional[List[MenuItemLocalisation]]:
        if self.localisations is None:
            return None
        placeholder = uuid4()
        return [
            MenuItemLocalisation(menu_item_id=placeholder, language_id=loc.language_id, text=loc.text, title=loc.title)
            for loc in self.localisations
        ]


class MenuReorder(BaseModel):
    """New order of a menu's items."""
    menu_item_ids: List[UUID] = Field(..., description="Menu item ids in display order")
