"""HTTP layer: the generic keyed-entity controller and the versioned routers."""
