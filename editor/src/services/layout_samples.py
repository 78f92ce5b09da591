"""Starter layout and element templates offered by the editor shell."""

from models.ui_node import UiNode
from models.layout_tree import LayoutTree
from models.ui_template import UiElementTemplate
from services.theme_manager import ThemedImage, ThemedText, ThemeColorTarget


def build_sample_layout(theme_manager=None, resolution=(1920, 1080)):
	"""Canvas with a header bar and a panel holding two buttons."""
	canvas = UiNode("Canvas", size_delta=resolution)
	tree = LayoutTree(canvas)

	background = tree.add_node(UiNode("Background", anchor_min=(0, 0), anchor_max=(1, 1), size_delta=(0, 0)))
	background.add_component(ThemedImage(ThemeColorTarget.BACKGROUND, manager=theme_manager))

	header = tree.add_node(UiNode("Header", anchor_min=(0, 1), anchor_max=(1, 1),
	                              pivot=(0.5, 1), size_delta=(0, 120)))
	header.add_component(ThemedImage(ThemeColorTarget.SECONDARY, manager=theme_manager))

	panel = tree.add_node(UiNode("Panel", size_delta=(600, 400)))
	panel.add_component(ThemedImage(ThemeColorTarget.PRIMARY, manager=theme_manager))

	for name, offset in (("OK Button", -140), ("Cancel Button", 140)):
		button = tree.add_node(UiNode(name, anchor_min=(0.5, 0), anchor_max=(0.5, 0),
		                              pivot=(0.5, 0), anchored_position=(offset, 40),
		                              size_delta=(200, 60)), panel)
		button.add_component(ThemedImage(ThemeColorTarget.ACCENT, manager=theme_manager))
		button.add_component(ThemedText(manager=theme_manager))
	return tree


def build_hud_layout(theme_manager=None, resolution=(1920, 1080)):
	"""Second canvas: a health bar pinned top-left and a minimap bottom-right."""
	tree = LayoutTree(UiNode("HUD", size_delta=resolution))

	health = tree.add_node(UiNode("Health Bar", anchor_min=(0, 1), anchor_max=(0, 1), pivot=(0, 1),
	                              anchored_position=(32, -32), size_delta=(400, 40)))
	health.add_component(ThemedImage(ThemeColorTarget.ACCENT, manager=theme_manager))

	minimap = tree.add_node(UiNode("Minimap", anchor_min=(1, 0), anchor_max=(1, 0), pivot=(1, 0),
	                               anchored_position=(-32, 32), size_delta=(256, 256)))
	minimap.add_component(ThemedImage(ThemeColorTarget.SECONDARY, manager=theme_manager))
	return tree


def default_templates(theme_manager=None):
	"""Element templates for the Insert menu."""
	panel = UiNode("Panel", size_delta=(300, 200))
	panel.add_component(ThemedImage(ThemeColorTarget.PRIMARY, manager=theme_manager))

	button = UiNode("Button", size_delta=(160, 48))
	button.add_component(ThemedImage(ThemeColorTarget.ACCENT, manager=theme_manager))
	button.add_component(ThemedText(manager=theme_manager))

	card = UiNode("Card", size_delta=(240, 320))
	card.add_component(ThemedImage(ThemeColorTarget.SECONDARY, manager=theme_manager))
	title = UiNode("Title", anchor_min=(0, 1), anchor_max=(1, 1), pivot=(0.5, 1),
	               anchored_position=(0, -12), size_delta=(-24, 40))
	title.add_component(ThemedText(manager=theme_manager))
	card.add_child(title)

	return [
		UiElementTemplate("", panel),
		UiElementTemplate("", button),
		UiElementTemplate("Card with Title", card),
	]
