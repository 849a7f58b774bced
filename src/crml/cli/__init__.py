"""CRML command line interface."""
