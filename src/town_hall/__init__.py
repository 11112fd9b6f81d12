"""Town Hall: internal question and voting backend."""
