"""
Admission Service package for the Admission Layer.

This package decides whether a credential-bearing request is admitted by
running it through an ordered chain of guards:

- app.guards: Guard contract plus rate limit, credential and role guards.
- app.chain: The guard chain and its evaluation algorithm.
- app.gateway: Entry point that owns a chain and records outcomes.
- app.directory: Identity directory interface and in-memory store.
- app.factory: Builds chains from service configuration.
- app.main: FastAPI application exposing admission over HTTP.

Design notes:
- Evaluation is synchronous and in-memory; module import must not perform
  IO.
- Rejections are values, never exceptions. Only misconfiguration raises.
- Use the shared/ utilities for logging, metrics and errors.
"""
