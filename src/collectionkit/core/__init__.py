"""Core functionality: configuration, logging, errors and mixin composition."""
