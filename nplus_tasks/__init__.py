"""N+1 Task Manager: REST task store and a deliberately unbatched client."""
