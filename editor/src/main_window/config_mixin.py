"""Configuration management for SnapUIViewWindow"""

import os
from services.editor_settings import EditorSettings
from utils.logger import loggerRaise
from constants import CONFIG_DIR_NAME, CONFIG_FILE_NAME


class ConfigMixin:
	"""Settings file load/save and toolbar state persistence"""
	
	def _init_config_paths(self):
		self.config_dir = os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME)
		self.config_file = os.path.join(self.config_dir, CONFIG_FILE_NAME)
	
	def _load_config(self):
		"""Load editor settings from the config file (defaults when missing)"""
		try:
			self.settings = EditorSettings.load(self.config_file)
		except Exception as e:
			self.settings = EditorSettings()
			loggerRaise(e, "Error loading config")
	
	def _save_config(self):
		"""Save editor settings to the config file"""
		try:
			self.settings.save(self.config_file)
		except Exception as e:
			loggerRaise(e, "Error saving config")
