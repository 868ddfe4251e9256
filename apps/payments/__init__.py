"""Settlement payments to foremen and drivers."""
