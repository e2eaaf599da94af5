"""Session lifecycle: the auto-end timer and the shared completion step."""
