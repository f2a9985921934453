"""
Call Webhook form.

A webhook node holds a single call_webhook action and a switch router on the
call's status with a Success exit and a Failure catch-all.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..config import ActionType, EditorType, HttpMethod, Operator, get_settings
from ..forms.base import NodeEditorSettings, RouterForm, get_action_uuid
from ..forms.state import FormEntry, FormState, RemoveItems
from ..forms.validators import validate, validate_required, validate_url
from ..models import Action, RenderNode, SwitchRouter, create_uuid
from .exits import CaseProps, create_render_node, resolve_exits
from .helpers import get_default_exit_uuid, get_result_name

SUCCESS_STATUS = "success"


@dataclass(frozen=True)
class Header:
    """One request header row; some row always has a blank name to type into."""

    uuid: str
    name: str = ""
    value: str = ""

    @property
    def empty(self) -> bool:
        return not self.name.strip() and not self.value.strip()


def _new_header() -> FormEntry:
    return FormEntry(Header(uuid=create_uuid()))


def _original_webhook(settings: NodeEditorSettings) -> Optional[Action]:
    original = settings.original_node
    if original.ui.type != EditorType.CALL_WEBHOOK:
        return None
    return next((a for a in original.node.actions if a.type == ActionType.CALL_WEBHOOK), None)


def _ensure_empty_header(headers: List[FormEntry]) -> List[FormEntry]:
    if any(not entry.value.name.strip() for entry in headers):
        return []
    return [_new_header()]


def node_to_state(settings: NodeEditorSettings) -> FormState:
    action = _original_webhook(settings)
    if action is None:
        return FormState(
            method=FormEntry(HttpMethod.GET),
            url=FormEntry(""),
            headers=[_new_header()],
            post_body=FormEntry(get_settings().editor.default_webhook_body),
            result_name=FormEntry(""),
            valid=False,
        )

    headers = [
        FormEntry(Header(uuid=create_uuid(), name=name, value=value))
        for name, value in (action.get("headers") or {}).items()
    ]
    headers.extend(_ensure_empty_header(headers))

    return FormState(
        method=FormEntry(HttpMethod(action.get("method", HttpMethod.GET.value))),
        url=FormEntry(action.get("url", "")),
        headers=headers,
        post_body=FormEntry(action.get("body", "")),
        result_name=FormEntry(action.get("result_name") or get_result_name(settings, EditorType.CALL_WEBHOOK)),
        valid=True,
    )


def headers_to_dict(headers: List[FormEntry]) -> Dict[str, str]:
    """Named headers in row order; blank rows are left out."""
    return {
        entry.value.name.strip(): entry.value.value
        for entry in headers
        if entry.value.name.strip()
    }


def state_to_node(settings: NodeEditorSettings, state: FormState) -> RenderNode:
    editor = get_settings().editor
    original = settings.original_node.node
    method = state.method.value

    params = {
        "method": method.value,
        "url": state.url.value,
        "headers": headers_to_dict(state.headers),
    }
    if method != HttpMethod.GET:
        params["body"] = state.post_body.value or editor.default_webhook_body
    if state.result_name.value:
        params["result_name"] = state.result_name.value

    action = Action(
        uuid=get_action_uuid(settings, ActionType.CALL_WEBHOOK),
        type=ActionType.CALL_WEBHOOK,
        params=params,
    )

    success_case = None
    if settings.original_node.ui.type == EditorType.CALL_WEBHOOK and isinstance(original.router, SwitchRouter):
        success_case = next(
            (c for c in original.router.cases if c.type == Operator.HAS_WEBHOOK_STATUS), None
        )

    resolved = resolve_exits(
        [CaseProps(
            type=Operator.HAS_WEBHOOK_STATUS,
            arguments=[SUCCESS_STATUS],
            exit_name=editor.webhook_success_exit_name,
            uuid=success_case.uuid if success_case else None,
        )],
        True,
        original.exits,
        default_exit_uuid=get_default_exit_uuid(original),
        non_match_name=editor.webhook_failure_exit_name,
    )

    router = SwitchRouter(
        operand=editor.webhook_operand,
        cases=resolved.cases,
        default_exit_uuid=resolved.default_exit,
        result_name=state.result_name.value or None,
    )
    return create_render_node(original.uuid, router, resolved.exits, EditorType.CALL_WEBHOOK, [action])


class WebhookRouterForm(RouterForm):
    """Method, URL, headers and body of a webhook call."""

    editor_type = EditorType.CALL_WEBHOOK
    node_to_state = staticmethod(node_to_state)
    state_to_node = staticmethod(state_to_node)

    def handle_method_changed(self, method: HttpMethod) -> bool:
        updates = {"method": FormEntry(method)}
        if method != HttpMethod.GET and not (self.state.post_body.value or "").strip():
            updates["post_body"] = FormEntry(get_settings().editor.default_webhook_body)
        return self.update(updates)

    def handle_url_changed(self, url: str) -> bool:
        return self.update({"url": validate("URL", url, [validate_required, validate_url])})

    def handle_body_changed(self, body: str) -> bool:
        return self.update({"post_body": FormEntry(body)})

    def handle_result_name_changed(self, result_name: str) -> bool:
        return self.update({"result_name": FormEntry(result_name)})

    def handle_header_updated(self, header: Header) -> bool:
        """Upsert a header row, keeping a row with a blank name available."""
        self.update({"headers": [FormEntry(header)]})
        return self.update({"headers": _ensure_empty_header(self.state.headers)})

    def handle_header_removed(self, header: Header) -> bool:
        self.update({}, [RemoveItems("headers", (FormEntry(header),))])
        return self.update({"headers": _ensure_empty_header(self.state.headers)})

    def validate_all(self) -> bool:
        return self.handle_url_changed(self.state.url.value)
