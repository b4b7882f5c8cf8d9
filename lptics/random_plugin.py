"""Registry of random number generator plug-ins."""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class UnknownPluginError(LookupError):
    """The requested plug-in is not registered."""


_REGISTRY: dict[str, Callable] = {}


def register_rng_plugin(name: str, factory: Callable) -> None:
    """Make ``factory(config)`` available under ``name``."""
    _REGISTRY[name] = factory


def rng_plugin_names() -> list[str]:
    """Return the names of all registered random number generators, sorted."""
    return sorted(name for name, factory in _REGISTRY.items() if factory is not None)


def print_rng_plugins() -> None:
    """Log the names of all registered random number generators."""
    logger.info("Available random number generator plug-ins:")
    for name in rng_plugin_names():
        logger.info("\t'%s'", name)


def select_rng_plugin(config):
    """Create the generator named by ``random/generator`` in ``config``."""
    name = config.get_value("random", "generator")
    factory = _REGISTRY.get(name)
    if factory is None:
        logger.info("Invalid/Unregistered random number generator plug-in encountered : %s", name)
        print_rng_plugins()
        raise UnknownPluginError("Unknown random number generator plug-in")
    logger.info("%-32s : %s", "Random number generator plugin", name)
    return factory(config)