"""HTTP access to the task backend."""
