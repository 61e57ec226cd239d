"""Status page service: liveness/readiness probes and on-demand downstream checks."""
