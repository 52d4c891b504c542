"""Formatter plugins.

Each subpackage provides one or more formatter plugins with a
create_plugin() factory. FormatterRegistry (formatter_pipeline) discovers
the bundled ones by name and assembles them into a pipeline.
"""
