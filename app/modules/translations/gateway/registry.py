"""Translator backend registry.

Backends register themselves by name with ``@register_backend`` when their
module is imported. ``activate_backends`` instantiates the enabled ones from
configuration, each with its own circuit breaker.
"""

import importlib
import pkgutil
from typing import Dict, Type

from infrastructure.logging import get_module_logger
from infrastructure.resilience import CircuitBreaker
from modules.translations.domain import ConfigurationError
from modules.translations.gateway.base import TranslatorBackend

logger = get_module_logger()

_discovered: Dict[str, Type[TranslatorBackend]] = {}


def register_backend(name: str):
    """Register a translator backend class under ``name``.

    Example:
        @register_backend("pseudo")
        class PseudoBackend(TranslatorBackend):
            ...
    """

    def decorator(obj):
        if not isinstance(obj, type):
            raise TypeError("register_backend decorator must be applied to a class")
        if not issubclass(obj, TranslatorBackend):
            raise TypeError(
                f"Backend must subclass TranslatorBackend: {name}, got {obj}"
            )
        if name in _discovered and _discovered[name] is not obj:
            raise RuntimeError(f"Backend already discovered with name: {name}")

        _discovered[name] = obj
        logger.debug("backend_discovered", backend=name, class_name=obj.__name__)
        return obj

    return decorator


def load_backends() -> Dict[str, Type[TranslatorBackend]]:
    """Import every module of the backends package so they self-register."""
    # pylint: disable=import-outside-toplevel
    from modules.translations.gateway import backends

    for module_info in pkgutil.iter_modules(backends.__path__):
        importlib.import_module(f"{backends.__name__}.{module_info.name}")
    return dict(_discovered)


def activate_backends(translations_settings) -> Dict[str, TranslatorBackend]:
    """Instantiate every enabled, discovered backend.

    Args:
        translations_settings: ``TranslationsFeatureSettings`` instance.

    Returns:
        Mapping of backend name to active instance.

    Raises:
        ConfigurationError: a backend is enabled in configuration but no
            class is registered under that name.
    """
    load_backends()
    new_active: Dict[str, TranslatorBackend] = {}

    for name, cfg in translations_settings.enabled_backends().items():
        backend_class = _discovered.get(name)
        if backend_class is None:
            raise ConfigurationError(
                f"Backend '{name}' is enabled but not registered",
                details={"backend": name, "registered": sorted(_discovered)},
            )

        breaker = None
        if translations_settings.circuit_breaker_enabled:
            breaker = CircuitBreaker(
                name=f"translator.{name}",
                failure_threshold=translations_settings.circuit_breaker_failure_threshold,
                timeout_seconds=translations_settings.circuit_breaker_timeout_seconds,
                half_open_max_calls=translations_settings.circuit_breaker_half_open_max_calls,
            )

        instance = backend_class(config=cfg)
        instance.name = name
        if breaker is not None:
            instance.attach_circuit_breaker(breaker)
        new_active[name] = instance
        logger.info(
            "backend_activated",
            backend=name,
            type=type(instance).__name__,
            circuit_breaker=breaker is not None,
        )

    logger.info("backends_activated", count=len(new_active), backends=list(new_active))
    return dict(new_active)
