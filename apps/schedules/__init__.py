"""Work schedules and their stage state machine."""
