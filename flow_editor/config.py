"""
Configuration for the Flow Editor engine.
"""

import logging
from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ActionType(str, Enum):
    """Action kinds that can live inside a node."""

    SEND_MSG = "send_msg"
    SEND_BROADCAST = "send_broadcast"
    SEND_EMAIL = "send_email"
    ADD_INPUT_LABELS = "add_input_labels"
    SET_RUN_RESULT = "set_run_result"
    SET_CONTACT_FIELD = "set_contact_field"
    SET_CONTACT_NAME = "set_contact_name"
    SET_CONTACT_LANGUAGE = "set_contact_language"
    SET_CONTACT_CHANNEL = "set_contact_channel"
    CALL_WEBHOOK = "call_webhook"


# Update contact is a single form that can produce any of these
CONTACT_ACTION_TYPES = (
    ActionType.SET_CONTACT_FIELD,
    ActionType.SET_CONTACT_NAME,
    ActionType.SET_CONTACT_LANGUAGE,
    ActionType.SET_CONTACT_CHANNEL,
)


class RouterType(str, Enum):
    """Router variants."""

    SWITCH = "switch"
    RANDOM = "random"


class EditorType(str, Enum):
    """Router-level node kinds presented by the node editor."""

    SPLIT_BY_EXPRESSION = "split_by_expression"
    WAIT_FOR_RESPONSE = "wait_for_response"
    CALL_WEBHOOK = "call_webhook"
    SPLIT_BY_RANDOM = "split_by_random"


class WaitType(str, Enum):
    """What a node waits for before routing."""

    MSG = "msg"


class Operator(str, Enum):
    """Case operators understood by switch routers."""

    HAS_ANY_WORD = "has_any_word"
    HAS_ALL_WORDS = "has_all_words"
    HAS_PHRASE = "has_phrase"
    HAS_ONLY_PHRASE = "has_only_phrase"
    HAS_BEGINNING = "has_beginning"
    HAS_PATTERN = "has_pattern"
    HAS_TEXT = "has_text"
    HAS_NUMBER = "has_number"
    HAS_NUMBER_BETWEEN = "has_number_between"
    HAS_NUMBER_EQ = "has_number_eq"
    HAS_NUMBER_GT = "has_number_gt"
    HAS_NUMBER_LT = "has_number_lt"
    HAS_DATE = "has_date"
    HAS_EMAIL = "has_email"
    HAS_PHONE = "has_phone"
    IS_TEXT_EQ = "is_text_eq"
    HAS_WEBHOOK_STATUS = "has_webhook_status"


class AssetType(str, Enum):
    """Kinds of selectable assets."""

    GROUP = "group"
    LABEL = "label"
    CONTACT = "contact"
    FIELD = "field"
    CONTACT_PROPERTY = "property"
    LANGUAGE = "language"
    CHANNEL = "channel"
    FLOW = "flow"
    RESULT = "result"
    REMOVE = "remove"


class HttpMethod(str, Enum):
    """Webhook request methods."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"


DEFAULT_WEBHOOK_BODY = """{
    "flow": @(json(run.flow)),
    "path": @(json(run.path)),
    "results": @(json(run.results)),
    "input": @(json(run.input)),
    "channel": @(json(run.input.channel)),
    "contact": @(json(contact))
}"""


class EditorConfig(BaseSettings):
    """Node editor defaults."""

    model_config = SettingsConfigDict(env_prefix="EDITOR_")

    # Operands
    default_operand: str = Field(default="@run.input", description="Operand for response routers")
    groups_operand: str = Field(default="@contact.groups", description="Operand for group splits")
    webhook_operand: str = Field(default="@run.webhook.status", description="Operand for webhook routers")

    # Exit naming
    other_exit_name: str = Field(default="Other", description="Catch-all exit when cases exist")
    all_responses_exit_name: str = Field(
        default="All Responses", description="Catch-all exit when there are no cases"
    )
    webhook_success_exit_name: str = Field(default="Success", description="Webhook success exit")
    webhook_failure_exit_name: str = Field(default="Failure", description="Webhook failure exit")

    # Webhook defaults
    default_webhook_body: str = Field(default=DEFAULT_WEBHOOK_BODY, description="Body for non-GET calls")

    # Limits
    max_result_name_length: int = Field(default=64, description="Max run result name length")
    max_random_buckets: int = Field(default=10, description="Max buckets for random splits")


class LocalizationConfig(BaseSettings):
    """Localization configuration."""

    model_config = SettingsConfigDict(env_prefix="LOCALIZATION_")

    base_language: str = Field(default="eng", description="ISO code of the flow's base language")


class Settings(BaseSettings):
    """Main engine settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    service_name: str = Field(default="flow-editor", description="Service name")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="info", description="Log level")

    # Sub-configurations
    editor: EditorConfig = Field(default_factory=EditorConfig)
    localization: LocalizationConfig = Field(default_factory=LocalizationConfig)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings."""
    return Settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Apply the standard log format at the configured level."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else getattr(
        logging, settings.log_level.upper(), logging.INFO
    )
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
