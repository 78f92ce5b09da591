"""Global logging and error handling utilities"""
import logging
import sys
import traceback
from PyQt5.QtWidgets import QMessageBox

# Detect debug mode - True if running from source, False if packaged
DEBUG_MODE = not getattr(sys, 'frozen', False)

_logger = logging.getLogger('SnapUI')
_main_window = None

def set_main_window(window):
    """Set the main window reference for showing popups"""
    global _main_window
    _main_window = window

def loggerRaise(e: Exception, user_message: str = None, title: str = "Error"):
    """Handle exceptions with an optional popup in release mode

    Args:
        e: The exception to handle
        user_message: User-friendly message to show in popup (optional)
        title: Title for the popup dialog

    In DEBUG_MODE the exception is re-raised immediately. Otherwise the
    traceback is logged, a critical message box is shown over the main
    window (when one is registered) and the exception is re-raised.
    """
    if DEBUG_MODE:
        raise e

    _logger.error("%s\n%s", user_message or title, traceback.format_exc())

    message = user_message if user_message else str(e)
    if _main_window:
        QMessageBox.critical(_main_window, title, message)
    else:
        _logger.error("Error popup (no window): %s - %s", title, message)

    raise e
