"""Declarative chart options and chart data helpers.

The world chart widget is driven by option schemas rather than bespoke view
logic. This package contains the option schema, its override resolver, the
cache-backed sample source, and the pipeline that turns resolved options
into renderable series bundles.
"""
