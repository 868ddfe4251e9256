"""Workers: foremen (작업반장) and drivers (운송기사)."""
