"""Part sources, layout export, batch experiments and the CLI."""
