"""Field operations service: realtime collection sync and dashboard statistics."""
