"""Domain layer — hook names and the action registry. No I/O."""
