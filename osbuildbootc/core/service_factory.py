#!/usr/bin/env python3
"""
Service Factory for Dependency Injection.

Creates the container holding every service the command-line handlers use.
"""

from osbuildbootc.config import config
from osbuildbootc.core.di_container import DIContainer
from osbuildbootc.core.service_interfaces import (
    IConfigurationService, ICommandExecutionService, IFileSystemService,
    IPreflightService, IBuildService, IVMService, IInstallService
)
from osbuildbootc.services import ConfigurationService, CommandExecutionService, FileSystemService


def create_service_container() -> DIContainer:
    """
    Create and configure the dependency injection container with all required services.

    Returns:
        DIContainer: Fully configured container with all services registered
    """
    container = DIContainer()
    _register_core_services(container)
    _register_application_services(container)
    return container


def _register_core_services(container: DIContainer) -> None:
    """Register core infrastructure services."""

    container.register_singleton(IConfigurationService, ConfigurationService(config))
    container.register_class(ICommandExecutionService, CommandExecutionService, singleton=True)
    container.register_class(IFileSystemService, FileSystemService, singleton=True)


def _register_application_services(container: DIContainer) -> None:
    """Register application-level services that depend on core services."""

    # Import here to avoid circular dependencies
    from osbuildbootc.core.preflight import PreflightService
    from osbuildbootc.core.build_orchestrator import BuildService
    from osbuildbootc.core.vm_manager import VMService
    from osbuildbootc.core.disk_installer import DiskInstaller

    container.register_class(IPreflightService, PreflightService, singleton=True)
    container.register_class(IBuildService, BuildService, singleton=True)
    container.register_class(IVMService, VMService, singleton=True)
    container.register_class(IInstallService, DiskInstaller, singleton=True)


def get_service_container() -> DIContainer:
    """
    Get a singleton instance of the configured service container.

    Returns:
        DIContainer: The global service container instance
    """
    if not hasattr(get_service_container, '_container'):
        get_service_container._container = create_service_container()
    return get_service_container._container


def reset_service_container() -> None:
    """Reset the global service container (useful for testing)."""
    if hasattr(get_service_container, '_container'):
        delattr(get_service_container, '_container')
