"""Settings package: environment-backed runtime and migration configuration."""

from .settings import (
	AppSettings,
	DatabaseUrlSettings,
	SettingsLoadError,
	config_load_database_url,
	config_load_settings,
)

__all__ = [
	"AppSettings",
	"DatabaseUrlSettings",
	"SettingsLoadError",
	"config_load_database_url",
	"config_load_settings",
]
