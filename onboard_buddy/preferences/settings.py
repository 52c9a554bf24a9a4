"""Settings Store - theme, layout and user preferences."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from onboard_buddy.core.store import Clock, Store, utc_now
from onboard_buddy.infrastructure.snapshots import SnapshotStore


class Theme(BaseModel):
    primary: str = "#39e079"
    secondary: str = "#f0f2f5"
    background: str = "#ffffff"
    text: str = "#111418"
    accent: str = "#0c7ff2"


class Layout(BaseModel):
    sidebar_width: int = 256
    content_max_width: int = 1280
    spacing: int = 16


class NotificationSettings(BaseModel):
    enabled: bool = True
    sound: bool = True
    desktop: bool = True


class UserPreferences(BaseModel):
    auto_save: bool = True
    show_tips: bool = True
    compact_mode: bool = False


class Settings(BaseModel):
    theme: Theme = Field(default_factory=Theme)
    layout: Layout = Field(default_factory=Layout)
    custom_texts: dict[str, str] = Field(default_factory=dict)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    preferences: UserPreferences = Field(default_factory=UserPreferences)


class SettingsStore(Store):
    """Partial updates merge into the current section; unknown keys are rejected."""

    name = "onboard-buddy-settings"
    version = 1

    def __init__(self, snapshots: SnapshotStore | None = None, clock: Clock = utc_now):
        super().__init__(snapshots, clock)
        self._settings = Settings()

    @property
    def settings(self) -> Settings:
        return self._settings

    def _merge(self, section: str, changes: dict[str, Any]) -> None:
        current = getattr(self._settings, section)
        unknown = set(changes) - set(type(current).model_fields)
        if unknown:
            raise ValueError(f"Unknown {section} settings: {', '.join(sorted(unknown))}")
        merged = type(current).model_validate({**current.model_dump(), **changes})
        self._settings = self._settings.model_copy(update={section: merged})
        self._commit()

    def update_theme(self, **changes: Any) -> None:
        self._merge("theme", changes)

    def update_layout(self, **changes: Any) -> None:
        self._merge("layout", changes)

    def update_notifications(self, **changes: Any) -> None:
        self._merge("notifications", changes)

    def update_preferences(self, **changes: Any) -> None:
        self._merge("preferences", changes)

    def update_custom_text(self, key: str, value: str) -> None:
        texts = {**self._settings.custom_texts, key: value}
        self._settings = self._settings.model_copy(update={"custom_texts": texts})
        self._commit()

    def reset_to_default(self) -> None:
        self._settings = Settings()
        self._commit()

    def to_state(self) -> dict[str, Any]:
        return self._settings.model_dump(mode="json")

    def load_state(self, state: dict[str, Any]) -> None:
        self._settings = Settings.model_validate(state)

    def migrate(self, state: dict[str, Any], from_version: int) -> dict[str, Any]:
        if from_version == 0:
            return Settings().model_dump(mode="json")
        return state
