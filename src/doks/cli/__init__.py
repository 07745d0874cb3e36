"""doks command line interface."""
