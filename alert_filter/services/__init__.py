"""Pipeline services: the alert notifier and the feedback collector."""
