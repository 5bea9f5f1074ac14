from .panels import PanelRenderer
from .visibility import PanelVisibility

__all__ = ["PanelRenderer", "PanelVisibility"]
