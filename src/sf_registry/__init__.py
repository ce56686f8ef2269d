"""sf-registry — private registry client for Salesforce LWC and Apex artifacts.

Resolves an artifact's dependency graph, packages it with its static
resources and ships it to the registry server.
"""

from sf_registry.version import __version__

__all__: list[str] = ["__version__"]
