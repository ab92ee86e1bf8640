"""User interface layers for cssgps."""
