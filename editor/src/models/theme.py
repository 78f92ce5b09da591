"""Theme values broadcast to themed components."""
from dataclasses import dataclass, field
from typing import Optional, Tuple

RGBA = Tuple[float, float, float, float]


@dataclass
class UiTheme:
    """Colors (RGBA, 0-1 floats), styling and font of one visual theme."""
    name: str = "Default"
    primary_color: RGBA = (1.0, 1.0, 1.0, 1.0)
    secondary_color: RGBA = (0.5, 0.5, 0.5, 1.0)
    background_color: RGBA = (0.5, 0.5, 0.5, 1.0)
    text_color: RGBA = (1.0, 1.0, 1.0, 1.0)
    accent_color: RGBA = (0.2, 0.5, 1.0, 1.0)
    border_radius: float = 8.0
    shadow_strength: float = 0.4
    main_font: Optional[str] = None
    metadata: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'primary_color': list(self.primary_color),
            'secondary_color': list(self.secondary_color),
            'background_color': list(self.background_color),
            'text_color': list(self.text_color),
            'accent_color': list(self.accent_color),
            'border_radius': self.border_radius,
            'shadow_strength': self.shadow_strength,
            'main_font': self.main_font,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'UiTheme':
        theme = cls()
        for key, value in data.items():
            if not hasattr(theme, key) or key == 'metadata':
                continue
            if key.endswith('_color') and value is not None:
                value = tuple(float(c) for c in value)
            setattr(theme, key, value)
        return theme


LIGHT_THEME = UiTheme(
    name="Light",
    primary_color=(0.95, 0.95, 0.95, 1.0),
    secondary_color=(0.8, 0.8, 0.82, 1.0),
    background_color=(0.9, 0.9, 0.9, 1.0),
    text_color=(0.1, 0.1, 0.1, 1.0),
    accent_color=(0.2, 0.5, 1.0, 1.0),
)

DARK_THEME = UiTheme(
    name="Dark",
    primary_color=(0.22, 0.22, 0.25, 1.0),
    secondary_color=(0.3, 0.3, 0.34, 1.0),
    background_color=(0.12, 0.12, 0.14, 1.0),
    text_color=(0.92, 0.92, 0.92, 1.0),
    accent_color=(0.95, 0.55, 0.15, 1.0),
)
