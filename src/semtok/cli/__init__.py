"""semtok command line interface."""
