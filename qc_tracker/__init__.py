"""QC Tracker.

Backend for a manufacturing quality-control tracking application. Operators
log inspections and administrators maintain reference data (customers,
customer sites, lines, defects) through a REST API.

High-level architecture
-----------------------

Most reference-data resources share one CRUD implementation, the keyed-entity
framework:

- ``qc_tracker.core.keyed``:

  - ``EntityConfig``: declarative description of a table and its natural key.
  - ``codec``: turns route parameters into key values and key values into a
    positional ``WHERE`` fragment, for single and composite keys alike.
  - ``GenericModel``: paginated listing, key lookups and writes that report
    expected failures as ``OperationResult`` values instead of raising.

- ``qc_tracker.server.api.controller``:

  - ``GenericController``: builds the FastAPI router for a model and renders
    the uniform ``{success, data, message, error}`` envelope.

Concrete entities (``Customer``, ``CustomerSite``) only contribute their
configuration, a row mapper and any endpoints that fall outside plain CRUD.
"""
