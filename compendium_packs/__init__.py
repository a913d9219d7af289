"""Round-trip tooling between source JSON folders and compiled compendium packs."""
