"""Allow ``python -m sf_registry`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m sf_registry`` behaves identically to the ``sf-registry``
console script.
"""

from __future__ import annotations

from sf_registry.cli.app import cli

if __name__ == "__main__":
    cli()
