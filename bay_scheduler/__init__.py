"""Bay schedule layout and rescheduling engine."""
