"""
Update Contact form.

One form covers setting the contact's name, language, channel or any custom
field; the chosen property decides which action kind is saved.
"""

from typing import Any, Dict, List

from ..config import ActionType, AssetType, CONTACT_ACTION_TYPES
from ..forms.base import ActionForm, NodeEditorSettings, get_action_uuid, original_action_of
from ..forms.state import FormEntry, FormState
from ..forms.validators import validate, validate_required
from ..models import Action, Asset, REMOVE_VALUE_ASSET

NAME_PROPERTY = Asset(id="name", name="Name", type=AssetType.CONTACT_PROPERTY)
CHANNEL_PROPERTY = Asset(id="channel", name="Channel", type=AssetType.CONTACT_PROPERTY)
LANGUAGE_PROPERTY = Asset(id="language", name="Language", type=AssetType.CONTACT_PROPERTY)

CONTACT_PROPERTIES: List[Asset] = [NAME_PROPERTY, LANGUAGE_PROPERTY, CHANNEL_PROPERTY]

PROPERTY_TYPES = {
    NAME_PROPERTY.id: ActionType.SET_CONTACT_NAME,
    CHANNEL_PROPERTY.id: ActionType.SET_CONTACT_CHANNEL,
    LANGUAGE_PROPERTY.id: ActionType.SET_CONTACT_LANGUAGE,
}


# =============================================================================
# Asset Conversion
# =============================================================================


def field_to_asset(field: Dict[str, Any]) -> Asset:
    return Asset(id=field.get("key", ""), name=field.get("name", ""), type=AssetType.FIELD)


def asset_to_field(asset: Asset) -> Dict[str, Any]:
    return {"key": asset.id, "name": asset.name}


def channel_to_asset(channel: Dict[str, Any]) -> Asset:
    if not channel or not channel.get("uuid"):
        return REMOVE_VALUE_ASSET
    return Asset(id=channel["uuid"], name=channel.get("name", ""), type=AssetType.CHANNEL)


def asset_to_channel(asset: Asset) -> Dict[str, Any]:
    if asset.id == REMOVE_VALUE_ASSET.id:
        return {}
    return {"uuid": asset.id, "name": asset.name}


def language_to_asset(iso: str, name: str = "") -> Asset:
    if not iso:
        return REMOVE_VALUE_ASSET
    return Asset(id=iso, name=name or iso, type=AssetType.LANGUAGE)


def asset_to_language(asset: Asset) -> str:
    if asset.id == REMOVE_VALUE_ASSET.id:
        return ""
    return asset.id


def sort_fields_and_properties(assets: List[Asset]) -> List[Asset]:
    """Name first, then by type, then alphabetically."""
    return sorted(assets, key=lambda a: (a != NAME_PROPERTY, a.type.value, a.name.lower()))


# =============================================================================
# Form
# =============================================================================


def initialize_form(settings: NodeEditorSettings) -> FormState:
    fields = {
        "type": ActionType.SET_CONTACT_NAME,
        "name": FormEntry(""),
        "channel": FormEntry(None),
        "language": FormEntry(None),
        "field": FormEntry(NAME_PROPERTY),
        "field_value": FormEntry(""),
    }

    action = original_action_of(settings, *CONTACT_ACTION_TYPES)
    if action is None:
        # default is updating name
        return FormState(fields, valid=False)

    fields["type"] = action.type
    if action.type == ActionType.SET_CONTACT_FIELD:
        fields["field"] = FormEntry(field_to_asset(action.get("field") or {}))
        fields["field_value"] = FormEntry(action.get("value", ""))
    elif action.type == ActionType.SET_CONTACT_CHANNEL:
        fields["field"] = FormEntry(CHANNEL_PROPERTY)
        fields["channel"] = FormEntry(channel_to_asset(action.get("channel") or {}))
    elif action.type == ActionType.SET_CONTACT_LANGUAGE:
        fields["field"] = FormEntry(LANGUAGE_PROPERTY)
        fields["language"] = FormEntry(language_to_asset(action.get("language", "")))
    elif action.type == ActionType.SET_CONTACT_NAME:
        fields["name"] = FormEntry(action.get("name", ""))

    return FormState(fields, valid=True)


def state_to_action(settings: NodeEditorSettings, state: FormState) -> Action:
    action_type = state.type
    uuid = get_action_uuid(settings, action_type)

    if action_type == ActionType.SET_CONTACT_FIELD:
        params = {"field": asset_to_field(state.field.value), "value": state.field_value.value}
    elif action_type == ActionType.SET_CONTACT_CHANNEL:
        params = {"channel": asset_to_channel(state.channel.value)}
    elif action_type == ActionType.SET_CONTACT_LANGUAGE:
        params = {"language": asset_to_language(state.language.value)}
    elif action_type == ActionType.SET_CONTACT_NAME:
        params = {"name": state.name.value}
    else:
        raise ValueError(f"Not a contact action: {action_type}")

    return Action(uuid=uuid, type=action_type, params=params)


class UpdateContactForm(ActionForm):
    """Sets a contact property or custom field."""

    action_type = ActionType.SET_CONTACT_NAME
    initialize_form = staticmethod(initialize_form)
    state_to_action = staticmethod(state_to_action)

    def handle_property_change(self, selection: Asset) -> bool:
        """Switch which property is being set, resetting its value."""
        if selection.type == AssetType.CONTACT_PROPERTY:
            action_type = PROPERTY_TYPES[selection.id]
            updates = {"type": action_type, "field": FormEntry(selection)}
            if action_type == ActionType.SET_CONTACT_NAME:
                updates["name"] = FormEntry("")
            elif action_type == ActionType.SET_CONTACT_CHANNEL:
                updates["channel"] = FormEntry(None)
            else:
                updates["language"] = FormEntry(None)
            return self.update(updates)

        return self.update({
            "type": ActionType.SET_CONTACT_FIELD,
            "field": FormEntry(selection),
            "field_value": FormEntry(""),
        })

    def handle_name_changed(self, name: str) -> bool:
        return self.update({"name": FormEntry(name)})

    def handle_field_value_changed(self, value: str) -> bool:
        return self.update({"field_value": FormEntry(value)})

    def handle_channel_changed(self, channel: Asset) -> bool:
        return self.update({"channel": validate("Channel", channel, [validate_required])})

    def handle_language_changed(self, language: Asset) -> bool:
        return self.update({"language": validate("Language", language, [validate_required])})

    def validate_all(self) -> bool:
        # only the chosen property needs a value
        if self.state.type == ActionType.SET_CONTACT_CHANNEL:
            return self.handle_channel_changed(self.state.channel.value)
        if self.state.type == ActionType.SET_CONTACT_LANGUAGE:
            return self.handle_language_changed(self.state.language.value)
        return self.update({
            "channel": FormEntry(self.state.channel.value),
            "language": FormEntry(self.state.language.value),
        })
