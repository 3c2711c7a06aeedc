"""Runtime layer: chunk planning/execution and the REST runner."""
