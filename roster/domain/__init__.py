"""Domain rules (validation, record shape) with no I/O."""
