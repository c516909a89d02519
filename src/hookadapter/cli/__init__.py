"""hookadapter command line interface."""
