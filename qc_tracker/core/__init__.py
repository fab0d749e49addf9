"""Core building blocks shared by the server: logging, persistence and the keyed-entity framework."""
