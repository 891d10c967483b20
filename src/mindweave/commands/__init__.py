"""mindweave.commands - CLI command implementations."""
