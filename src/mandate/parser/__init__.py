"""Spec loading -- read a YAML/JSON document and validate it as a :class:`~mandate.models.Spec`.

Typical usage::

    from mandate.parser import load_spec

    spec = load_spec("cli.yaml")

Sub-modules:

* :mod:`~mandate.parser.loader` -- I/O layer (file, URL, stdin) plus format
  decoding.
"""

from mandate.parser.loader import load_spec, parse_spec_text

__all__ = ["load_spec", "parse_spec_text"]
