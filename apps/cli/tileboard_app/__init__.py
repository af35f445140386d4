"""TileBoard command line application."""
