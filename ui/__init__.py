"""Interactive preview of generated worlds (dearpygui)."""
