"""HTTP layer: auth gate, schemas and routers."""
