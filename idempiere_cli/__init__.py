"""
iDempiere CLI

Scaffolds iDempiere OSGi plugin projects (Maven/Tycho multi-module trees)
and adds components to existing plugins without duplicating shared
infrastructure or breaking hand-edited descriptors.
"""

__version__ = "0.1.0"

from idempiere_cli.cli.commands import main
from idempiere_cli.core.scaffold_engine import ScaffoldEngine

__all__ = [
    "ScaffoldEngine",
    "main",
]
