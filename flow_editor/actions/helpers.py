"""
Shared helpers for action forms.
"""

from typing import Any, Dict, List, Sequence

from ..config import AssetType
from ..models import Action, Asset


def get_recipients(action: Action) -> List[Asset]:
    """Groups then contacts of a recipients action, as assets."""
    selected = [
        Asset(id=group["uuid"], name=group.get("name", ""), type=AssetType.GROUP)
        for group in action.get("groups") or []
    ]
    selected.extend(
        Asset(id=contact["uuid"], name=contact.get("name", ""), type=AssetType.CONTACT)
        for contact in action.get("contacts") or []
    )
    return selected


def assets_to_refs(assets: Sequence[Asset], asset_type: AssetType) -> List[Dict[str, Any]]:
    """Wire references (uuid + name) for the assets of one type."""
    return [{"uuid": a.id, "name": a.name} for a in assets if a.type == asset_type]


def refs_to_assets(refs: Sequence[Dict[str, Any]], asset_type: AssetType) -> List[Asset]:
    return [Asset(id=ref["uuid"], name=ref.get("name", ""), type=asset_type) for ref in refs]
