from __future__ import annotations

from typing import Callable, ClassVar, Dict, List, Optional

from pipehub.core.contracts import GeneratorFn, RuntimeFactory


class RegistryError(RuntimeError):
    pass


class GeneratorRegistry:
    """Named consumers of :class:`~pipehub.core.contracts.GenerateConfig` (plugin build steps)."""

    _registry: ClassVar[Dict[str, GeneratorFn]] = {}

    @classmethod
    def register(cls, *, name: str, generator: GeneratorFn, overwrite: bool = False) -> None:
        if not overwrite and name in cls._registry:
            existing = cls._registry[name]
            raise RegistryError(f"Generator already registered for name={name!r}: {existing}")
        cls._registry[name] = generator

    @classmethod
    def get(cls, name: str) -> GeneratorFn:
        try:
            return cls._registry[name]
        except KeyError as exc:
            raise RegistryError(
                f"No generator registered for name={name!r}; available: {cls.names()}"
            ) from exc

    @classmethod
    def try_get(cls, name: str) -> Optional[GeneratorFn]:
        return cls._registry.get(name)

    @classmethod
    def names(cls) -> List[str]:
        return sorted(cls._registry)

    @classmethod
    def clear(cls) -> None:
        cls._registry.clear()


class RuntimeRegistry:
    """Named factories building a server client from a :class:`~pipehub.core.contracts.ClientConfig`."""

    _registry: ClassVar[Dict[str, RuntimeFactory]] = {}

    @classmethod
    def register(cls, *, name: str, factory: RuntimeFactory, overwrite: bool = False) -> None:
        if not overwrite and name in cls._registry:
            existing = cls._registry[name]
            raise RegistryError(f"Runtime already registered for name={name!r}: {existing}")
        cls._registry[name] = factory

    @classmethod
    def get(cls, name: str) -> RuntimeFactory:
        try:
            return cls._registry[name]
        except KeyError as exc:
            raise RegistryError(
                f"No runtime registered for name={name!r}; available: {cls.names()}"
            ) from exc

    @classmethod
    def try_get(cls, name: str) -> Optional[RuntimeFactory]:
        return cls._registry.get(name)

    @classmethod
    def names(cls) -> List[str]:
        return sorted(cls._registry)

    @classmethod
    def clear(cls) -> None:
        cls._registry.clear()


def register_generator(*, name: str, overwrite: bool = False) -> Callable[[GeneratorFn], GeneratorFn]:
    def decorator(generator: GeneratorFn) -> GeneratorFn:
        GeneratorRegistry.register(name=name, generator=generator, overwrite=overwrite)
        return generator

    return decorator


def register_runtime(*, name: str, overwrite: bool = False) -> Callable[[RuntimeFactory], RuntimeFactory]:
    def decorator(factory: RuntimeFactory) -> RuntimeFactory:
        RuntimeRegistry.register(name=name, factory=factory, overwrite=overwrite)
        return factory

    return decorator
