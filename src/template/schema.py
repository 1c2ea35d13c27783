"""Template intent schema (Pydantic models).

This schema is the contract between the caller (UI layer, CLI, API) and the deterministic document
builder. An intent describes *what* the user wants to send; it is not yet wire-correct. Kinds are
accepted case-insensitively and normalized to canonical uppercase tokens at validation time.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator


class Category(StrEnum):
    """Platform-defined template categories; each one selects a different rule set."""

    marketing = "MARKETING"
    utility = "UTILITY"
    authentication = "AUTHENTICATION"


class HeaderKind(StrEnum):
    """Supported header formats (`none` omits the header section)."""

    text = "TEXT"
    image = "IMAGE"
    video = "VIDEO"
    document = "DOCUMENT"
    location = "LOCATION"
    none = "NONE"


MEDIA_HEADER_KINDS: frozenset[HeaderKind] = frozenset(
    {HeaderKind.image, HeaderKind.video, HeaderKind.document}
)


class CardMediaKind(StrEnum):
    """Media formats allowed in a carousel card header."""

    image = "IMAGE"
    video = "VIDEO"


class ButtonKind(StrEnum):
    """Canonical button kinds. `unsupported` marks input the builder drops with a warning."""

    quick_reply = "QUICK_REPLY"
    phone_number = "PHONE_NUMBER"
    url = "URL"
    flow = "FLOW"
    copy_code = "COPY_CODE"
    unsupported = "UNSUPPORTED"


class FlowAction(StrEnum):
    """What a FLOW button does when tapped."""

    navigate = "navigate"
    data_exchange = "data_exchange"


# Input aliases accepted for button kinds (after upper-casing).
_BUTTON_KIND_ALIASES: dict[str, ButtonKind] = {
    "QUICK_REPLY": ButtonKind.quick_reply,
    "PHONE_NUMBER": ButtonKind.phone_number,
    "URL": ButtonKind.url,
    "FLOW": ButtonKind.flow,
    "COPY_CODE": ButtonKind.copy_code,
    "OTP": ButtonKind.copy_code,
}

# Fields each button kind carries; anything else in the raw payload is discarded.
_BUTTON_FIELDS: dict[ButtonKind, tuple[str, ...]] = {
    ButtonKind.quick_reply: ("text",),
    ButtonKind.phone_number: ("text", "phone_number"),
    ButtonKind.url: ("text", "url", "example"),
    ButtonKind.flow: ("text", "flow_id", "flow_action", "navigate_screen"),
    ButtonKind.copy_code: ("text", "example"),
    ButtonKind.unsupported: ("text",),
}


def _upper_token(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().upper()
    return value


def _stringify_mapping(value: Any) -> Any:
    """Accept `{1: "John"}` as well as `{"1": "John"}` for placeholder mappings."""

    if value is None:
        return {}
    if isinstance(value, dict):
        return {str(k).strip(): "" if v is None else str(v) for k, v in value.items()}
    return value


class _Model(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class QuickReplyButton(_Model):
    """A button that sends its own text back as a reply."""

    type: Literal["QUICK_REPLY"] = "QUICK_REPLY"
    text: str = ""


class PhoneNumberButton(_Model):
    """A call-to-action button dialing `phone_number`."""

    type: Literal["PHONE_NUMBER"] = "PHONE_NUMBER"
    text: str = ""
    phone_number: str


class UrlButton(_Model):
    """A call-to-action button opening `url`; `example` samples a `{{1}}` URL suffix."""

    type: Literal["URL"] = "URL"
    text: str = ""
    url: str
    example: str | None = None

    @field_validator("example", mode="before")
    @classmethod
    def unwrap_example(cls, value: Any) -> Any:
        """Accept the wire shape (`["abc"]`) as input as well as a bare string."""

        if isinstance(value, list):
            return value[0] if value else None
        return value


class FlowButton(_Model):
    """A button opening a platform flow."""

    type: Literal["FLOW"] = "FLOW"
    text: str = ""
    flow_id: str = ""
    flow_action: FlowAction = FlowAction.navigate
    navigate_screen: str | None = None

    @field_validator("flow_action", mode="before")
    @classmethod
    def lower_flow_action(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class CopyCodeButton(_Model):
    """A copy-code (OTP) button; `example` is the sample code shown at review time."""

    type: Literal["COPY_CODE"] = "COPY_CODE"
    text: str = ""
    example: str | None = None

    @field_validator("example", mode="before")
    @classmethod
    def unwrap_example(cls, value: Any) -> Any:
        if isinstance(value, list):
            return value[0] if value else None
        return value


class UnsupportedButton(_Model):
    """A button whose kind is not supported; kept only so the builder can report it."""

    type: Literal["UNSUPPORTED"] = "UNSUPPORTED"
    original_type: str
    text: str = ""


ButtonIntent = Annotated[
    QuickReplyButton
    | PhoneNumberButton
    | UrlButton
    | FlowButton
    | CopyCodeButton
    | UnsupportedButton,
    Field(discriminator="type"),
]

_BUTTON_ADAPTER: TypeAdapter[Any] = TypeAdapter(ButtonIntent)


def normalize_button_payload(obj: Any) -> Any:
    """Normalize a raw button payload so it validates as exactly one `ButtonIntent` variant.

    - The kind (`type`) is matched case-insensitively; `OTP` is an alias of `COPY_CODE`.
    - Unknown kinds become `UNSUPPORTED` (the builder drops them with a warning).
    - Only the fields relevant to the kind are kept.

    Model instances and non-mapping values are returned unchanged.
    """

    if not isinstance(obj, dict):
        return obj

    raw_type = obj.get("type")
    token = _upper_token(raw_type) if raw_type is not None else ""
    kind = _BUTTON_KIND_ALIASES.get(token, ButtonKind.unsupported)

    payload: dict[str, Any] = {"type": kind.value}
    for field in _BUTTON_FIELDS[kind]:
        if field in obj and obj[field] is not None:
            payload[field] = obj[field]
    if kind == ButtonKind.unsupported:
        payload["original_type"] = str(raw_type or "")
    return payload


def button_from_obj(obj: Any) -> ButtonIntent:
    """Validate and construct a single button intent from a decoded JSON object."""

    return _BUTTON_ADAPTER.validate_python(normalize_button_payload(obj))


def _normalize_buttons(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, list):
        return [normalize_button_payload(item) for item in value]
    return value


class HeaderIntent(_Model):
    """Optional header description.

    `media_handle` comes from an external upload step; `placeholder_values` maps a placeholder index
    (`"1"`) to a sample value and `placeholder_labels` maps it to a human label (`"company"`) used to
    infer a sample when no value is given.
    """

    kind: HeaderKind = HeaderKind.none
    text: str | None = None
    media_handle: str | None = None
    placeholder_values: dict[str, str] = Field(default_factory=dict)
    placeholder_labels: dict[str, str] = Field(default_factory=dict)

    @field_validator("kind", mode="before")
    @classmethod
    def upper_kind(cls, value: Any) -> Any:
        return _upper_token(value)

    @field_validator("placeholder_values", "placeholder_labels", mode="before")
    @classmethod
    def stringify_placeholders(cls, value: Any) -> Any:
        return _stringify_mapping(value)


class BodyIntent(_Model):
    """Message body text with optional placeholder samples."""

    text: str = ""
    placeholder_values: dict[str, str] = Field(default_factory=dict)
    placeholder_labels: dict[str, str] = Field(default_factory=dict)
    add_security_recommendation: bool | None = None

    @field_validator("placeholder_values", "placeholder_labels", mode="before")
    @classmethod
    def stringify_placeholders(cls, value: Any) -> Any:
        return _stringify_mapping(value)


class FooterIntent(_Model):
    """Optional footer text."""

    text: str = ""


class CardMedia(_Model):
    """Header media of a carousel card."""

    kind: CardMediaKind
    handle: str = ""

    @field_validator("kind", mode="before")
    @classmethod
    def upper_kind(cls, value: Any) -> Any:
        return _upper_token(value)


class CardIntent(_Model):
    """One carousel card: media header, optional body and 1..2 buttons."""

    header_media: CardMedia
    body: BodyIntent | None = None
    buttons: list[ButtonIntent] = Field(default_factory=list)

    @field_validator("buttons", mode="before")
    @classmethod
    def normalize_buttons(cls, value: Any) -> Any:
        return _normalize_buttons(value)


class CarouselIntent(_Model):
    """Ordered carousel cards. Card count limits are enforced by the builder."""

    cards: list[CardIntent] = Field(default_factory=list)


class Intent(_Model):
    """A validated template intent.

    The category is required and frozen: it is never inferred from content.
    """

    name: str = Field(min_length=1)
    category: Category = Field(frozen=True)
    language: str | None = None
    header: HeaderIntent | None = None
    body: BodyIntent
    footer: FooterIntent | None = None
    buttons: list[ButtonIntent] = Field(default_factory=list)
    carousel: CarouselIntent | None = None
    message_send_ttl_seconds: int | None = Field(default=None, gt=0)

    @field_validator("category", mode="before")
    @classmethod
    def upper_category(cls, value: Any) -> Any:
        """Accept categories case-insensitively (`marketing` -> `MARKETING`)."""

        return _upper_token(value)

    @field_validator("language", mode="before")
    @classmethod
    def blank_language_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("buttons", mode="before")
    @classmethod
    def normalize_buttons(cls, value: Any) -> Any:
        """Route every raw button through the single normalizing factory."""

        return _normalize_buttons(value)

    @model_validator(mode="after")
    def validate_shape(self) -> Intent:
        """A carousel intent is a distinct shape: no plain header, footer or top-level buttons."""

        if self.carousel is not None:
            if self.header is not None and self.header.kind != HeaderKind.none:
                raise ValueError("carousel intents cannot carry a header")
            if self.buttons:
                raise ValueError("carousel intents cannot carry top-level buttons")
            if self.footer is not None and self.footer.text:
                raise ValueError("carousel intents cannot carry a footer")
        return self

    @property
    def is_carousel(self) -> bool:
        return self.carousel is not None


def intent_from_obj(obj: Any) -> Intent:
    """Validate and parse an Intent from an arbitrary decoded JSON object."""

    return Intent.model_validate(obj)
