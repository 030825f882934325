#!/usr/bin/env python3
"""
Dependency Injection Container for osbuildbootc.

Services are registered against their Protocol interface and built on first
use; constructor parameters are resolved from their type annotations.
"""

from typing import TypeVar, Type, Any, Dict, Callable, List
import inspect


T = TypeVar('T')
ServiceFactory = Callable[..., T]


class ServiceNotFoundError(Exception):
    """Raised when a requested service is not registered in the container."""
    def __init__(self, service_type: Type):
        self.service_type = service_type
        super().__init__(f"Service of type {service_type.__name__} is not registered")


class CircularDependencyError(Exception):
    """Raised when a circular dependency is detected during service resolution."""
    def __init__(self, dependency_chain: List[Type]):
        self.dependency_chain = dependency_chain
        chain_str = " -> ".join(dep.__name__ for dep in dependency_chain)
        super().__init__(f"Circular dependency detected: {chain_str}")


class DIContainer:
    """
    Maps service interfaces to instances.

    Singletons are created once and cached; transient registrations build a
    new instance on every resolve.
    """

    def __init__(self):
        self._services: Dict[Type, ServiceFactory] = {}
        self._singletons: Dict[Type, Any] = {}
        # Ordered so a cycle can be reported in resolution order
        self._resolving: List[Type] = []

    def register_singleton(self, service_type: Type[T], instance: T) -> None:
        """
        Register an already constructed instance for the given service type.

        Args:
            service_type: The interface that this instance implements
            instance: The instance returned for every resolve
        """
        self._services[service_type] = lambda: instance
        self._singletons[service_type] = instance

    def register_class(self, service_type: Type[T], implementation_class: Type[T],
                       singleton: bool = True) -> None:
        """
        Register a class as the implementation for a service type.

        Args:
            service_type: The interface that this class implements
            implementation_class: The concrete class to construct
            singleton: Cache the first instance instead of building one per resolve
        """
        if singleton:
            def factory():
                if service_type not in self._singletons:
                    self._singletons[service_type] = self._create_instance(implementation_class)
                return self._singletons[service_type]
            self._services[service_type] = factory
        else:
            self._services[service_type] = lambda: self._create_instance(implementation_class)

    def resolve(self, service_type: Type[T]) -> T:
        """
        Resolve an instance of the requested service type.

        Raises:
            ServiceNotFoundError: If the service is not registered
            CircularDependencyError: If a circular dependency is detected
        """
        if service_type not in self._services:
            raise ServiceNotFoundError(service_type)

        if service_type in self._resolving:
            raise CircularDependencyError(self._resolving + [service_type])

        if service_type in self._singletons:
            return self._singletons[service_type]

        self._resolving.append(service_type)
        try:
            return self._services[service_type]()
        finally:
            self._resolving.remove(service_type)

    def _create_instance(self, cls: Type[T]) -> T:
        """Instantiate cls, resolving each annotated constructor parameter without a default."""
        sig = inspect.signature(cls.__init__)
        args = {}

        for name, param in sig.parameters.items():
            if name == 'self':
                continue
            if param.default is not inspect.Parameter.empty:
                continue
            if param.annotation is not inspect.Parameter.empty:
                args[name] = self.resolve(param.annotation)

        return cls(**args)
