"""recordstore command line interface."""
