"""Stub generation -- render a typed Python stub module from a CLI spec.

Exports:
    generate_typedef: Render and write the stub to a path.
    render_typedef: Render the stub and return it as a string.
"""

from mandate.typedef.generator import generate_typedef, render_typedef

__all__ = ["generate_typedef", "render_typedef"]
