# Validation Package
# Submodules are imported directly (schemas.validation depends on validation.cache).
