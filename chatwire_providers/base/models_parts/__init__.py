"""Implementation modules for ``chatwire_providers.base.models``."""
