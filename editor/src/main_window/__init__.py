"""Main window mixins for SnapUIViewWindow"""

from .config_mixin import ConfigMixin
from .ui_setup_mixin import UISetupMixin

__all__ = ['ConfigMixin', 'UISetupMixin']
