"""Pure domain value types. No I/O."""
