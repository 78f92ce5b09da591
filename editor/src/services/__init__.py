"""Editor services: preview rendering, selection, dragging, snapping, themes, settings."""
