"""
Shared display settings for the calendar widgets.

Set once by MainWindow (or by the embedding application) before views are
created; widgets read them when they build their pages.
"""

from PySide6.QtGui import QFont

from pagecal_core.config import (
    LayoutConfig, LocalizationConfig, ColorsConfig, LabelsConfig, ViewConfig
)

_view_config: ViewConfig = ViewConfig()
_layout_config: LayoutConfig = LayoutConfig()
_localization_config: LocalizationConfig = LocalizationConfig()
_colors_config: ColorsConfig = ColorsConfig()
_labels_config: LabelsConfig = LabelsConfig()


def set_view_config(config: ViewConfig):
    global _view_config
    _view_config = config


def get_view_config() -> ViewConfig:
    return _view_config


def set_layout_config(config: LayoutConfig):
    """Set the layout configuration (fonts, hour height)."""
    global _layout_config
    _layout_config = config


def get_layout_config() -> LayoutConfig:
    return _layout_config


def set_localization_config(config: LocalizationConfig):
    global _localization_config
    _localization_config = config


def get_localization_config() -> LocalizationConfig:
    return _localization_config


def set_colors_config(config: ColorsConfig):
    global _colors_config
    _colors_config = config


def get_colors_config() -> ColorsConfig:
    return _colors_config


def set_labels_config(config: LabelsConfig):
    global _labels_config
    _labels_config = config


def get_labels_config() -> LabelsConfig:
    return _labels_config


def get_hour_height() -> int:
    """Height of one hour in the day and week grids, in pixels."""
    return _layout_config.hour_height


def get_text_font() -> QFont:
    """Font for event text."""
    return QFont(_layout_config.text_font, _layout_config.text_font_size)


def get_interface_font() -> tuple[str, int]:
    """Interface font name and size, for style sheets."""
    return (_layout_config.interface_font, _layout_config.interface_font_size)
